"""punchclock package.

Kiosk attendance and HR self-service backend, organized by feature modules
(geo, employees, attendance, timesheet, requests, ...) with a thin Flask
controller layer over service/repository layers.
"""
