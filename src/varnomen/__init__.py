"""
variant nomenclature: annotate genomic variants with their transcript and protein level effects
"""
__version__ = '0.1.0'
