"""Realm, user and group implementations.

Backends:
    - memory: Plain in-process objects
    - keycloak: Keycloak Admin REST API
"""
