from __future__ import annotations

import json
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import CalcType, ComponentType
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import SalaryComponent, SalaryTemplate
from .repository import SalaryTemplateRepository


def _component_json(c: SalaryComponent) -> dict:
    return {"name": c.name, "type": c.type.value, "calc_type": c.calc_type.value, "value": str(c.value)}


def _to_template(r: dict) -> SalaryTemplate:
    raw = r.get("components") or "[]"
    items = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    return SalaryTemplate(
        template_id=int(r["template_id"]),
        name=r["name"],
        description=r.get("description"),
        basic_salary=to_decimal(r["basic_salary"]),
        components=tuple(
            SalaryComponent(
                name=c["name"],
                type=ComponentType(c["type"]),
                calc_type=CalcType(c.get("calc_type") or CalcType.FIXED.value),
                value=to_decimal(c["value"]),
                order=i,
            )
            for i, c in enumerate(items)
        ),
    )


class MySQLSalaryTemplateRepository(MySQLRepository, SalaryTemplateRepository):
    def list_templates(self) -> Sequence[SalaryTemplate]:
        with self._cursor() as cur:
            cur.execute("SELECT template_id, name, description, basic_salary, components FROM salary_templates ORDER BY name ASC")
            return [_to_template(r) for r in fetchall(cur)]

    def get_template(self, template_id: int) -> Optional[SalaryTemplate]:
        with self._cursor() as cur:
            cur.execute(
                "SELECT template_id, name, description, basic_salary, components FROM salary_templates WHERE template_id=%s",
                (int(template_id),),
            )
            row = fetchone(cur)
            return _to_template(row) if row else None

    def upsert_template(
        self,
        *,
        name: str,
        description: Optional[str],
        basic_salary: Decimal,
        components: Sequence[SalaryComponent],
    ) -> int:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO salary_templates(name, description, basic_salary, components)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    description=VALUES(description),
                    basic_salary=VALUES(basic_salary),
                    components=VALUES(components),
                    template_id=LAST_INSERT_ID(template_id)
                """,
                (name, description, basic_salary, json.dumps([_component_json(c) for c in components])),
            )
            return int(cur.lastrowid)
