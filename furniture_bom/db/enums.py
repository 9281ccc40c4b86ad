# furniture_bom/db/enums.py
import enum


# Component related enums
class Hand(enum.Enum):
    """Orientation of mirrored parts, preserved across substitution."""
    LEFT = "Left"
    RIGHT = "Right"
    NONE = "None"


# Module related enums
class ModuleCategory(enum.Enum):
    BAJOS = "Bajos"          # 底柜
    ALTOS = "Altos"          # 吊柜
    COLUMNAS = "Columnas"    # 高柜
    IMPORTED = "Imported"    # CSV 导入时自动生成的模块


# Aesthetic vocabulary placeholders written by the importer
GENERIC_MODEL = "Generic"
STANDARD_FINISH = "Standard"
DEFAULT_CATEGORY = "General"
