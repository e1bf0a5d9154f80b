from __future__ import annotations

import csv
import io
import logging

from flask import Flask, jsonify, request

from ..attendance.model import AnalyticsFilters
from ..common.validators import clamp_limit, is_flag_set, optional_filter, optional_int_filter
from ..core.constants import DEFAULT_ABSENTEE_LIMIT, MAX_ABSENTEE_LIMIT
from ..core.exceptions import DataSourceError, InvalidFilterError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def filters_from_args(args) -> AnalyticsFilters:
    return AnalyticsFilters(
        type=args.get("type") or "student",
        time_range=args.get("timeRange") or "week",
        department_id=optional_filter(args.get("departmentId")),
        risk_level=optional_filter(args.get("riskLevel")),
        subject_id=optional_int_filter(args.get("subjectId"), "subjectId"),
        course_id=optional_filter(args.get("courseId")),
        section_id=optional_int_filter(args.get("sectionId"), "sectionId"),
        year_level=optional_filter(args.get("yearLevel")),
        start_date=optional_filter(args.get("startDate")),
        end_date=optional_filter(args.get("endDate")),
    )


def register(app: Flask, container: Container) -> None:
    def _error(error: str, details: str, status: int):
        return jsonify({"success": False, "error": error, "details": details}), status

    def _load_analytics():
        filters = filters_from_args(request.args)
        no_cache = is_flag_set(request.args.get("noCache"))
        return container.analytics_service.get_analytics(filters, no_cache=no_cache)

    def _write_series_csv(*, rows: list[dict], filename: str):
        """Write chart rows to a CSV response (labels first, then metrics)."""

        fieldnames: list[str] = []
        for row in rows:
            for name in row:
                if name not in fieldnames:
                    fieldnames.append(name)
        label_fields = [f for f in ("hour", "date", "week", "month") if f in fieldnames]
        fieldnames = label_fields + [f for f in fieldnames if f not in label_fields]

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/analytics", methods=["GET"], endpoint="attendance_analytics")
    def attendance_analytics():
        try:
            return jsonify(_load_analytics())
        except InvalidFilterError as e:
            return _error("Invalid filter", str(e), 400)
        except ValidationError as e:
            return _error("Invalid date range provided", str(e), 400)
        except DataSourceError as e:
            logger.exception("Database query error")
            return _error("Database query failed", str(e), 500)
        except Exception as e:
            logger.exception("Error in analytics API")
            return _error("Failed to fetch analytics data", str(e), 500)

    @app.route("/api/attendance/analytics/timeseries.csv", methods=["GET"], endpoint="attendance_analytics_csv")
    def attendance_analytics_csv():
        try:
            result = _load_analytics()
        except InvalidFilterError as e:
            return _error("Invalid filter", str(e), 400)
        except ValidationError as e:
            return _error("Invalid date range provided", str(e), 400)
        except DataSourceError as e:
            logger.exception("Database query error")
            return _error("Database query failed", str(e), 500)
        except Exception as e:
            logger.exception("Error in analytics CSV export")
            return _error("Failed to fetch analytics data", str(e), 500)

        time_range = request.args.get("timeRange") or "week"
        return _write_series_csv(
            rows=result["data"]["timeBasedData"],
            filename=f"attendance_{time_range}.csv",
        )

    @app.route("/api/analytics/absentees", methods=["GET"], endpoint="analytics_absentees")
    def analytics_absentees():
        try:
            limit = clamp_limit(request.args.get("limit"), default=DEFAULT_ABSENTEE_LIMIT, maximum=MAX_ABSENTEE_LIMIT)
            ranking = container.analytics_service.top_absentees(
                filters_from_args(request.args),
                start=(request.args.get("start") or "").strip(),
                end=(request.args.get("end") or "").strip(),
                q=request.args.get("q") or "",
                limit=limit,
            )
            return jsonify(ranking)
        except ValidationError as e:
            return _error("Invalid request", str(e), 400)
        except DataSourceError as e:
            logger.exception("Database query error")
            return _error("Database query failed", str(e), 500)
        except Exception as e:
            logger.exception("GET /api/analytics/absentees error")
            return _error("Failed to load top absentees", str(e), 500)
