"""
Simulator adapters.
"""
from .spring import Camera, SpringSimulator

__all__ = ["Camera", "SpringSimulator"]
