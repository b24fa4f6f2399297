"""
Services module for business logic separation.

This module contains the path generator, the snippet store and the
snippet lifecycle service, keeping business logic separate from API
endpoints and database models.
"""
