from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import admin_required, body_date, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @login_required
    def get_settings():
        return ok(container.settings_service.current())

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="settings_update")
    @admin_required
    def update_settings():
        body = json_body()
        settings = container.settings_service.update(
            name=body.get("name"),
            working_days_per_month=body.get("working_days_per_month"),
            geo_fence_enabled=body.get("geo_fence_enabled"),
        )
        return ok(settings, "Settings updated")

    # Holidays

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    def holidays():
        year = request.args.get("year", type=int) or now_local().year
        return ok(container.settings_service.list_holidays(year))

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="holiday_create")
    @admin_required
    def add_holiday():
        body = json_body()
        holiday_id = container.settings_service.add_holiday(
            name=body.get("name", ""),
            holiday_date=body_date(body, "date"),
            type=body.get("type") or "NATIONAL",
        )
        return ok({"holiday_id": holiday_id}, "Holiday added", 201)

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holiday_delete")
    @admin_required
    def delete_holiday(holiday_id: int):
        container.settings_service.delete_holiday(holiday_id)
        return ok(message="Holiday deleted")

    # Geo-fence locations

    @app.route("/api/geo-locations", methods=["GET"], endpoint="geo_locations_list")
    @login_required
    def geo_locations():
        return ok(container.geo_fence_service.list_locations())

    @app.route("/api/geo-locations/check", methods=["POST"], endpoint="geo_locations_check")
    @login_required
    def geo_check():
        body = json_body()
        try:
            lat, lng = float(body["latitude"]), float(body["longitude"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Latitude and longitude are required")
        return ok(container.geo_fence_service.check(lat, lng))

    @app.route("/api/admin/geo-locations", methods=["POST"], endpoint="geo_location_create")
    @admin_required
    def add_geo_location():
        body = json_body()
        location_id = container.geo_fence_service.add_location(
            name=body.get("name", ""),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            radius=body.get("radius"),
            address=body.get("address"),
        )
        return ok({"location_id": location_id}, "Location added", 201)

    @app.route("/api/admin/geo-locations/<int:location_id>", methods=["DELETE"], endpoint="geo_location_delete")
    @admin_required
    def remove_geo_location(location_id: int):
        container.geo_fence_service.remove_location(location_id)
        return ok(message="Location removed")
