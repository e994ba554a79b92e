"""Core application for the HealthDesk backend.

This package contains models, serializers, services, views and route
registrations for admin user management, ambulance dispatch, hospital
service requests and the notification feed.
"""
