"""iTunes collections, genre ids, sort orders and storefront ids."""

from enum import Enum, IntEnum


class Collection(str, Enum):
    """RSS chart collections."""
    TOP_MAC = "topmacapps"
    TOP_FREE_MAC = "topfreemacapps"
    TOP_GROSSING_MAC = "topgrossingmacapps"
    TOP_PAID_MAC = "toppaidmacapps"
    NEW_IOS = "newapplications"
    NEW_FREE_IOS = "newfreeapplications"
    NEW_PAID_IOS = "newpaidapplications"
    TOP_FREE_IOS = "topfreeapplications"
    TOP_FREE_IPAD = "topfreeipadapplications"
    TOP_GROSSING_IOS = "topgrossingapplications"
    TOP_GROSSING_IPAD = "topgrossingipadapplications"
    TOP_PAID_IOS = "toppaidapplications"
    TOP_PAID_IPAD = "toppaidipadapplications"


class Category(IntEnum):
    """App Store genre ids."""
    # Main categories
    BOOKS = 6018
    BUSINESS = 6000
    CATALOGS = 6022
    DEVELOPER_TOOLS = 6026
    EDUCATION = 6017
    ENTERTAINMENT = 6016
    FINANCE = 6015
    FOOD_AND_DRINK = 6023
    GAMES = 6014
    GRAPHICS_AND_DESIGN = 6027
    HEALTH_AND_FITNESS = 6013
    LIFESTYLE = 6012
    MAGAZINES_AND_NEWSPAPERS = 6021
    MEDICAL = 6020
    MUSIC = 6011
    NAVIGATION = 6010
    NEWS = 6009
    PHOTO_AND_VIDEO = 6008
    PRODUCTIVITY = 6007
    REFERENCE = 6006
    SHOPPING = 6024
    SOCIAL_NETWORKING = 6005
    SPORTS = 6004
    STICKERS = 6025
    TRAVEL = 6003
    UTILITIES = 6002
    WEATHER = 6001

    # Game subcategories
    GAMES_ACTION = 7001
    GAMES_ADVENTURE = 7002
    GAMES_ARCADE = 7003
    GAMES_BOARD = 7004
    GAMES_CARD = 7005
    GAMES_CASINO = 7006
    GAMES_DICE = 7007
    GAMES_EDUCATIONAL = 7008
    GAMES_FAMILY = 7009
    GAMES_MUSIC = 7011
    GAMES_PUZZLE = 7012
    GAMES_RACING = 7013
    GAMES_ROLE_PLAYING = 7014
    GAMES_SIMULATION = 7015
    GAMES_SPORTS = 7016
    GAMES_STRATEGY = 7017
    GAMES_TRIVIA = 7018
    GAMES_WORD = 7019


class Sort(str, Enum):
    """Review feed orderings."""
    RECENT = "mostRecent"
    HELPFUL = "mostHelpful"


class Device(str, Enum):
    IPAD = "iPadSoftware"
    MAC = "macSoftware"
    ALL = "software"


# Storefront ids keyed by lowercase country code
MARKETS = {
    "dz": 143563, "ao": 143564, "ai": 143538, "ar": 143505, "am": 143524,
    "au": 143460, "at": 143445, "az": 143568, "bh": 143559, "bb": 143541,
    "by": 143565, "be": 143446, "bz": 143555, "bm": 143542, "bo": 143556,
    "bw": 143525, "br": 143503, "vg": 143543, "bn": 143560, "bg": 143526,
    "ca": 143455, "ky": 143544, "cl": 143483, "cn": 143465, "co": 143501,
    "cr": 143495, "hr": 143494, "cy": 143557, "cz": 143489, "dk": 143458,
    "dm": 143545, "ec": 143509, "eg": 143516, "sv": 143506, "ee": 143518,
    "fi": 143447, "fr": 143442, "de": 143443, "gb": 143444, "gh": 143573,
    "gr": 143448, "gd": 143546, "gt": 143504, "gy": 143553, "hn": 143510,
    "hk": 143463, "hu": 143482, "is": 143558, "in": 143467, "id": 143476,
    "ie": 143449, "il": 143491, "it": 143450, "jm": 143511, "jp": 143462,
    "jo": 143528, "ke": 143529, "kr": 143466, "kw": 143493, "lv": 143519,
    "lb": 143497, "lt": 143520, "lu": 143451, "mo": 143515, "mk": 143530,
    "mg": 143531, "my": 143473, "ml": 143532, "mt": 143521, "mu": 143533,
    "mx": 143468, "ms": 143547, "np": 143484, "nl": 143452, "nz": 143461,
    "ni": 143512, "ne": 143534, "ng": 143561, "no": 143457, "om": 143562,
    "pk": 143477, "pa": 143485, "py": 143513, "pe": 143507, "ph": 143474,
    "pl": 143478, "pt": 143453, "qa": 143498, "ro": 143487, "ru": 143469,
    "sa": 143479, "sn": 143535, "sg": 143464, "sk": 143496, "si": 143499,
    "za": 143472, "es": 143454, "lk": 143486, "sr": 143554, "se": 143456,
    "ch": 143459, "tw": 143470, "tz": 143572, "th": 143475, "tn": 143536,
    "tr": 143480, "ug": 143537, "ua": 143492, "ae": 143481, "us": 143441,
    "uy": 143514, "uz": 143566, "ve": 143502, "vn": 143471, "ye": 143571,
}
