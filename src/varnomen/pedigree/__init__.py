"""
families and modes of inheritance
"""
