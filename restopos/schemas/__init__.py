"""
Schemas Pydantic de l'API restopos.
"""
