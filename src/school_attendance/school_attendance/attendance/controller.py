from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date
from ..common.validators import require_iso_date
from ..core.enums import SubjectKind
from ..core.exceptions import RemoteError, ValidationError
from ..container import Container
from .aggregation import DayPercentage, WeeklySummary

logger = logging.getLogger(__name__)

ATTENDANCE_URL = "/api/<any(student, teacher):kind>-attendance"


def _error(message: str, status_code: int, error: Optional[str] = None):
    return jsonify({"error": error or message, "message": message}), status_code


def _day_to_dict(day: DayPercentage) -> dict:
    return {
        "date": format_iso_date(day.work_date) if day.work_date else "",
        "percentage": day.percentage,
        "present": day.present,
    }


def summary_to_dict(summary: WeeklySummary) -> dict:
    return {
        "total_subjects": summary.total_subjects,
        "weekly_average": summary.weekly_average,
        "best_day": _day_to_dict(summary.best_day),
        "worst_day": _day_to_dict(summary.worst_day),
        "consistency_score": summary.consistency_score,
        "days": [_day_to_dict(d) for d in summary.day_percentages],
        "chart": [
            {
                "date": format_iso_date(row.work_date),
                "present": row.present,
                "absent": row.absent,
                "not_marked": row.not_marked,
            }
            for row in summary.chart_rows
        ],
    }


def register(app: Flask, container: Container) -> None:
    def _date_range() -> tuple[date, date]:
        single = request.args.get("date")
        if single:
            day = require_iso_date(single, "date")
            return day, day
        start = request.args.get("start_date")
        end = request.args.get("end_date")
        if not start or not end:
            raise ValidationError("Please provide either a date or a date range")
        return require_iso_date(start, "start_date"), require_iso_date(end, "end_date")

    @app.route(ATTENDANCE_URL, methods=["GET"], endpoint="attendance_list")
    def attendance_list(kind: str):
        try:
            start, end = _date_range()
            records = container.attendance_records_service.list_records(
                kind=SubjectKind(kind),
                start_date=start,
                end_date=end,
                cohort_id=request.args.get("class_id"),
                sub_cohort_id=request.args.get("section_id"),
            )
        except ValidationError as e:
            return _error(str(e), 400, "Invalid request data")
        except Exception:
            logger.exception("error fetching %s attendance", kind)
            return _error("Failed to fetch attendance records", 500, "Internal server error")

        return jsonify(
            {
                "data": [r.to_dict() for r in records],
                "message": "Attendance records fetched successfully",
            }
        )

    @app.route(ATTENDANCE_URL, methods=["POST"], endpoint="attendance_save")
    def attendance_save(kind: str):
        try:
            result = container.attendance_records_service.save_records(
                kind=SubjectKind(kind),
                payload=request.get_json(silent=True),
            )
        except ValidationError as e:
            return _error(str(e), 400, "Invalid request data")
        except RemoteError as e:
            return _error(e.message, e.status_code or 502)
        except Exception:
            logger.exception("error saving %s attendance", kind)
            return _error("Failed to save attendance records", 500, "Internal server error")

        return jsonify({"message": result.message, "records": [r.to_dict() for r in result.records]})

    @app.route(ATTENDANCE_URL, methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(kind: str):
        try:
            deleted = container.attendance_records_service.delete_record(
                kind=SubjectKind(kind),
                subject_id=request.args.get("subject_id"),
                work_date=request.args.get("date"),
            )
        except ValidationError as e:
            return _error(str(e), 400, "Invalid request data")
        except Exception:
            logger.exception("error deleting %s attendance", kind)
            return _error("Failed to delete attendance", 500, "Internal server error")

        if not deleted:
            return _error("Attendance record not found", 404, "Not found")
        return jsonify({"message": "Attendance deleted successfully"})

    @app.route(ATTENDANCE_URL + "/summary", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary(kind: str):
        try:
            start, end = _date_range()
            today_s = request.args.get("today")
            today = require_iso_date(today_s, "today") if today_s else date.today()
            summary = container.attendance_records_service.period_summary(
                kind=SubjectKind(kind),
                start_date=start,
                end_date=end,
                today=today,
                cohort_id=request.args.get("class_id"),
                sub_cohort_id=request.args.get("section_id"),
                subject_ids=request.args.getlist("subject_id"),
            )
        except ValidationError as e:
            return _error(str(e), 400, "Invalid request data")
        except Exception:
            logger.exception("error summarizing %s attendance", kind)
            return _error("Failed to summarize attendance", 500, "Internal server error")

        return jsonify(summary_to_dict(summary))
