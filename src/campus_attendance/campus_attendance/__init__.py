"""Campus attendance and parking tracker.

This package is organized by feature modules (employees, attendance, parking,
users, reports, audit) with a thin Flask controller layer on top of
service/repository layers.
"""
