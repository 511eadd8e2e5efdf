from .household import Household
from .household_summary import HouseholdSummary
from .conversion_factor import ConversionFactor
from .electricity import ElectricityUsage
from .natural_gas import NaturalGasUsage
from .gasoline import GasolinePurchase
from .air_travel import AirTrip
from .food import FoodEntry, FoodDetail

__all__ = [
    "Household",
    "HouseholdSummary",
    "ConversionFactor",
    "ElectricityUsage",
    "NaturalGasUsage",
    "GasolinePurchase",
    "AirTrip",
    "FoodEntry",
    "FoodDetail",
]
