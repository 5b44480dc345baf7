"""TPAD (Tennessee Property Assessment Data) site constants."""

from typing import Dict

TPAD_BASE_URL = "https://assessment.cot.tn.gov/TPAD"

# County dropdown is selected by name, not code
COUNTY_NAMES: Dict[str, str] = {
    "001": "Anderson",
    "002": "Bedford",
    "003": "Benton",
    "004": "Bledsoe",
    "005": "Blount",
    "006": "Bradley",
    "007": "Campbell",
    "008": "Cannon",
    "009": "Carroll",
    "010": "Carter",
    "011": "Cheatham",
    "012": "Chester",
    "013": "Claiborne",
    "014": "Clay",
    "015": "Cocke",
    "016": "Coffee",
    "017": "Crockett",
    "018": "Cumberland",
    "019": "Davidson",
    "020": "Decatur",
    "021": "DeKalb",
    "022": "Dickson",
    "023": "Dyer",
    "024": "Fayette",
    "025": "Fentress",
    "026": "Franklin",
    "027": "Gibson",
    "028": "Giles",
    "029": "Grainger",
    "030": "Greene",
    "031": "Grundy",
    "032": "Hamblen",
    "033": "Hamilton",
    "034": "Hancock",
    "035": "Hardeman",
    "036": "Hardin",
    "037": "Hawkins",
    "038": "Haywood",
    "039": "Henderson",
    "040": "Henry",
    "041": "Hickman",
    "042": "Houston",
    "043": "Humphreys",
    "044": "Jackson",
    "045": "Jefferson",
    "046": "Johnson",
    "047": "Knox",
    "048": "Lake",
    "049": "Lauderdale",
    "050": "Lawrence",
    "051": "Lewis",
    "052": "Lincoln",
    "053": "Loudon",
    "054": "Macon",
    "055": "Madison",
    "056": "Marion",
    "057": "Marshall",
    "058": "Maury",
    "059": "McMinn",
    "060": "McNairy",
    "061": "Meigs",
    "062": "Monroe",
    "063": "Montgomery",
    "064": "Moore",
    "065": "Morgan",
    "066": "Obion",
    "067": "Overton",
    "068": "Perry",
    "069": "Pickett",
    "070": "Polk",
    "071": "Putnam",
    "072": "Rhea",
    "073": "Roane",
    "074": "Robertson",
    "075": "Rutherford",
    "076": "Scott",
    "077": "Sequatchie",
    "078": "Sevier",
    "079": "Shelby",
    "080": "Smith",
    "081": "Stewart",
    "082": "Sullivan",
    "083": "Sumner",
    "084": "Tipton",
    "085": "Trousdale",
    "086": "Unicoi",
    "087": "Union",
    "088": "Van Buren",
    "089": "Warren",
    "090": "Washington",
    "091": "Wayne",
    "092": "Weakley",
    "093": "White",
    "094": "Williamson",
    "095": "Wilson",
}

# Search rows carry no city; stubs default to the county seat
COUNTY_SEATS: Dict[str, str] = {
    "084": "COVINGTON",
}

# Labels of the #classSelect dropdown
CLASSIFICATION_OPTIONS: Dict[str, str] = {
    "ALL": "All Classifications",
    "00": "00 - Residential",
    "01": "01 - County",
    "02": "02 - City",
    "03": "03 - State",
}

# Search form
COUNTY_SELECT = "#countySelect"
CLASS_SELECT = "#classSelect"
SALE_DATE_START_INPUT = "#saleDateRangeStartSelect"
SALE_DATE_END_INPUT = "#saleDateRangeEndSelect"
SEARCH_BUTTON = "button.searchButton"
ADVANCED_SEARCH_TOGGLE_TEXT = "Advanced Search"

# Results (DataTables)
RESULTS_TABLE = "#searchResultsTable"
RESULT_ROWS = "#searchResultsTable tbody tr"
NEXT_PAGE_BUTTON = ".paginate_button.next"
CURRENT_PAGE_BUTTON = ".paginate_button.current"
RESULTS_INFO = ".dataTables_info"

# Real result rows have at least this many cells; "no matching records" rows have one
MIN_RESULT_CELLS = 12

# Parcel detail page
SALES_TABLE = "table.table-striped"
MIN_SALE_CELLS = 7


def get_county_name(code: str) -> str:
    """County name for a three-digit code, or the code itself if unknown."""
    return COUNTY_NAMES.get(code, code)
