"""Coaching Center package.

This package is organized by feature modules (students, attendance, submissions,
notifications) with a thin Flask controller layer and service/repository layers.
"""
