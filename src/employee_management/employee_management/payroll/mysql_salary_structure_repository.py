from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import CalcType, ComponentType
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import SalaryComponent, SalaryStructure
from .repository import SalaryStructureRepository


class MySQLSalaryStructureRepository(MySQLRepository, SalaryStructureRepository):
    def _load(self, cur, employee_id: int) -> Optional[SalaryStructure]:
        cur.execute(
            "SELECT structure_id, employee_id, basic_salary FROM salary_structures WHERE employee_id=%s",
            (int(employee_id),),
        )
        row = fetchone(cur)
        if not row:
            return None

        cur.execute(
            """
            SELECT component_id, name, type, calc_type, value, is_active, sort_order
            FROM salary_components
            WHERE structure_id=%s
            ORDER BY sort_order ASC, component_id ASC
            """,
            (int(row["structure_id"]),),
        )
        components = tuple(
            SalaryComponent(
                component_id=int(c["component_id"]),
                name=c["name"],
                type=ComponentType(c["type"]),
                calc_type=CalcType(c["calc_type"]),
                value=to_decimal(c["value"]),
                is_active=bool(c["is_active"]),
                order=int(c["sort_order"]),
            )
            for c in fetchall(cur)
        )
        return SalaryStructure(
            structure_id=int(row["structure_id"]),
            employee_id=int(row["employee_id"]),
            basic_salary=to_decimal(row["basic_salary"]),
            components=components,
        )

    def get_structure(self, employee_id: int) -> Optional[SalaryStructure]:
        with self._cursor() as cur:
            return self._load(cur, employee_id)

    def replace_structure(
        self,
        *,
        employee_id: int,
        basic_salary: Decimal,
        components: Sequence[SalaryComponent],
    ) -> SalaryStructure:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO salary_structures(employee_id, basic_salary)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE
                    basic_salary=VALUES(basic_salary),
                    structure_id=LAST_INSERT_ID(structure_id)
                """,
                (int(employee_id), basic_salary),
            )
            structure_id = int(cur.lastrowid)

            cur.execute("DELETE FROM salary_components WHERE structure_id=%s", (structure_id,))
            if components:
                cur.executemany(
                    """
                    INSERT INTO salary_components(structure_id, name, type, calc_type, value, is_active, sort_order)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (structure_id, c.name, c.type.value, c.calc_type.value, c.value, int(c.is_active), i)
                        for i, c in enumerate(components)
                    ],
                )

            return self._load(cur, employee_id)
