"""SalonX API - multi-tenant salon management backend"""

__version__ = "1.0.0"
