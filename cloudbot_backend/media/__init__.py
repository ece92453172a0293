"""
Media helpers shared by the relay operations: upload sources and transformation tags.
"""
