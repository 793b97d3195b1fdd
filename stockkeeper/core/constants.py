MOVEMENT_IN = "IN"
MOVEMENT_OUT = "OUT"
MOVEMENT_TYPES = (MOVEMENT_IN, MOVEMENT_OUT)

ACTION_STOCK_IN = "STOCK_IN"
ACTION_STOCK_OUT = "STOCK_OUT"
ACTION_UPDATE = "UPDATE"
ACTION_LOGIN = "LOGIN"
ACTION_LOGOUT = "LOGOUT"
ACTIVITY_ACTIONS = (
    ACTION_STOCK_IN,
    ACTION_STOCK_OUT,
    ACTION_UPDATE,
    ACTION_LOGIN,
    ACTION_LOGOUT,
)

ITEM_CATEGORIES = ("Paint", "Tools", "Electrical", "Plumbing")
UNCATEGORIZED = "Uncategorized"
