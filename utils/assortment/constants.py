"""
Master data and user-facing messages for GRN → packet assortment
"""

SHAPES = [
    "Round", "Princess", "Oval", "Emerald", "Pear",
    "Marquise", "Cushion", "Radiant", "Asscher", "Heart",
]
COLORS = ["D", "E", "F", "G", "H", "I", "J", "K", "L", "M", "N"]
CLARITIES = ["FL", "IF", "VVS1", "VVS2", "VS1", "VS2", "SI1", "SI2"]
STAGES = ["sorted", "certified", "polished"]

DEFAULT_STAGE = "sorted"

# Attributes that must be set before a new packet can receive carats
CLASSIFICATION_KEYS = ("shape", "color", "clarity")
EDITABLE_ATTRIBUTES = CLASSIFICATION_KEYS + ("stage",)

MODE_EXISTING = "existing"
MODE_NEW = "new"

# ==================== MESSAGES ====================
MSG_SELECTION_REQUIRED = "Warehouse and GRN required"
MSG_CODE_REQUIRED = "Generate packet code for all new packets"
MSG_CLASSIFICATION_REQUIRED = "Shape, Color & Clarity required"
MSG_NO_VALID_ALLOCATIONS = "No valid allocations"
MSG_SELECT_ATTRIBUTES_FIRST = "Select Shape, Color & Clarity first"
MSG_SUBMIT_SUCCESS = "GRN successfully assorted into packets"
MSG_SUBMIT_FAILED = "Assortment failed"
MSG_SUBMIT_IN_PROGRESS = "Assortment is already being submitted"
MSG_CODE_FAILED = "Could not generate packet code"
