"""School Attendance package.

This package is organized by feature modules (attendance, database, ...)
with a thin Flask controller layer over service/store/gateway layers.
"""
