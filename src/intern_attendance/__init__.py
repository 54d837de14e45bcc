"""Intern Attendance package.

The attendance session engine is organized by feature modules (attendance,
verification) with a thin Flask controller layer over service/repository
layers.
"""
