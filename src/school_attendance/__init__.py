"""School attendance package.

Organized by feature modules (schedules, subjects, lessons, attendance, users)
with a thin Flask controller layer over service/repository layers.
"""
