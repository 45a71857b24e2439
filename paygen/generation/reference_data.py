"""
Static lookup tables used by the business-logic synthesizer and field rules.

Order matters for every tuple that is sampled by index: reordering a table
changes which value a given seed selects.
"""

from __future__ import annotations

from typing import Dict, NamedTuple, Tuple

# (ISO-3 country, ISO-4217 currency) sampled uniformly for merchant and issuer.
COUNTRY_CURRENCIES: Tuple[Tuple[str, str], ...] = (
    ("USA", "USD"),
    ("CAN", "CAD"),
    ("GBR", "GBP"),
    ("JPN", "JPY"),
    ("AUS", "AUD"),
    ("CHE", "CHF"),
    ("SWE", "SEK"),
    ("NOR", "NOK"),
    ("DNK", "DKK"),
    ("POL", "PLN"),
    ("CZE", "CZK"),
    ("HUN", "HUF"),
    ("BGR", "BGN"),
    ("ROU", "RON"),
    ("KOR", "KRW"),
    ("MEX", "MXN"),
    ("BRA", "BRL"),
    ("ARG", "ARS"),
    ("CHL", "CLP"),
    ("COL", "COP"),
    ("PER", "PEN"),
    ("ARE", "AED"),
    ("ZAF", "ZAR"),
    ("SGP", "SGD"),
    ("DEU", "EUR"),
    ("FRA", "EUR"),
    ("ITA", "EUR"),
    ("ESP", "EUR"),
    ("NLD", "EUR"),
    ("BEL", "EUR"),
    ("AUT", "EUR"),
    ("IRL", "EUR"),
    ("PRT", "EUR"),
    ("GRC", "EUR"),
    ("FIN", "EUR"),
    ("SVN", "EUR"),
    ("EST", "EUR"),
    ("LVA", "EUR"),
    ("LTU", "EUR"),
    ("LUX", "EUR"),
    ("MLT", "EUR"),
    ("CYP", "EUR"),
    ("HRV", "EUR"),
)

# Units of USD per one unit of currency.
TO_USD: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 1.05,
    "GBP": 1.27,
    "JPY": 0.0067,
    "CAD": 0.72,
    "AUD": 0.65,
    "CHF": 1.13,
    "SEK": 0.096,
    "NOK": 0.091,
    "DKK": 0.14,
    "PLN": 0.25,
    "CZK": 0.042,
    "HUF": 0.0027,
    "BGN": 0.54,
    "RON": 0.21,
    "KRW": 0.00075,
    "MXN": 0.049,
    "BRL": 0.17,
    "ARS": 0.0010,
    "CLP": 0.0010,
    "COP": 0.00023,
    "PEN": 0.26,
    "AED": 0.27,
    "ZAR": 0.055,
    "SGD": 0.74,
}

# Units of currency per one USD.
FROM_USD: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.95,
    "GBP": 0.79,
    "JPY": 149.5,
    "CAD": 1.39,
    "AUD": 1.54,
    "CHF": 0.88,
    "SEK": 10.4,
    "NOK": 11.0,
    "DKK": 7.1,
    "PLN": 4.0,
    "CZK": 23.8,
    "HUF": 370.0,
    "BGN": 1.86,
    "RON": 4.75,
    "KRW": 1330.0,
    "MXN": 20.4,
    "BRL": 5.8,
    "ARS": 1000.0,
    "CLP": 970.0,
    "COP": 4350.0,
    "PEN": 3.85,
    "AED": 3.67,
    "ZAR": 18.2,
    "SGD": 1.35,
}

GENERIC_CURRENCIES: Tuple[str, ...] = ("USD", "EUR", "GBP", "CAD", "JPY", "AUD")


class Merchant(NamedTuple):
    name: str
    dba: str
    legal_name: str
    category_code: str
    region_code: str
    merchant_id: str


_NA, _EU, _AP, _LA, _MEA = "001", "002", "003", "004", "005"

MERCHANTS: Dict[str, Tuple[Merchant, ...]] = {
    "USA": (
        Merchant("Amazon", "Amazon.com", "Amazon.com Inc", "5999", _NA, "MID001234567890"),
        Merchant("Walmart", "Walmart", "Walmart Inc", "5411", _NA, "MID002345678901"),
        Merchant("Target", "Target", "Target Corporation", "5331", _NA, "MID003456789012"),
        Merchant("Costco", "Costco", "Costco Wholesale Corporation", "5300", _NA, "MID004567890123"),
        Merchant("Home Depot", "Home Depot", "The Home Depot Inc", "5211", _NA, "MID005678901234"),
        Merchant("Starbucks", "Starbucks", "Starbucks Corporation", "5814", _NA, "MID006789012345"),
        Merchant("McDonald's", "McDonald's", "McDonald's Corporation", "5814", _NA, "MID007890123456"),
        Merchant("Apple Store", "Apple Store", "Apple Inc", "5732", _NA, "MID008901234567"),
        Merchant("Best Buy", "Best Buy", "Best Buy Co Inc", "5732", _NA, "MID009012345678"),
        Merchant("CVS Pharmacy", "CVS", "CVS Health Corporation", "5912", _NA, "MID011234567890"),
        Merchant("Nike", "Nike Store", "Nike Inc", "5655", _NA, "MID013456789012"),
        Merchant("Kroger", "Kroger", "The Kroger Co", "5411", _NA, "MID016789012345"),
    ),
    "CAN": (
        Merchant("Tim Hortons", "Tim Hortons", "Tim Hortons Inc", "5814", _NA, "MID026789012345"),
        Merchant("Canadian Tire", "Canadian Tire", "Canadian Tire Corporation", "5531", _NA, "MID027890123456"),
        Merchant("Loblaws", "Loblaws", "Loblaw Companies Limited", "5411", _NA, "MID028901234567"),
        Merchant("Shoppers Drug Mart", "Shoppers", "Shoppers Drug Mart Corporation", "5912", _NA, "MID029012345678"),
        Merchant("Hudson's Bay", "The Bay", "Hudson's Bay Company", "5311", _NA, "MID031234567890"),
    ),
    "GBR": (
        Merchant("Tesco", "Tesco", "Tesco PLC", "5411", _EU, "MID040123456789"),
        Merchant("Sainsbury's", "Sainsbury's", "J Sainsbury plc", "5411", _EU, "MID041234567890"),
        Merchant("John Lewis", "John Lewis", "John Lewis Partnership", "5311", _EU, "MID042345678901"),
        Merchant("Marks & Spencer", "M&S", "Marks and Spencer Group plc", "5311", _EU, "MID043456789012"),
        Merchant("Boots", "Boots", "Walgreens Boots Alliance", "5912", _EU, "MID045678901234"),
    ),
    "FRA": (
        Merchant("Carrefour", "Carrefour", "Carrefour SA", "5411", _EU, "MID047890123456"),
        Merchant("Leclerc", "Leclerc", "E.Leclerc", "5411", _EU, "MID048901234567"),
        Merchant("Galeries Lafayette", "Galeries Lafayette", "Groupe Galeries Lafayette", "5311", _EU, "MID049012345678"),
        Merchant("Auchan", "Auchan", "Groupe Auchan", "5411", _EU, "MID050123456789"),
    ),
    "DEU": (
        Merchant("REWE", "REWE", "REWE Group", "5411", _EU, "MID052345678901"),
        Merchant("Lidl", "Lidl", "Lidl Stiftung & Co KG", "5411", _EU, "MID053456789012"),
        Merchant("MediaMarkt", "MediaMarkt", "MediaMarkt Saturn Retail Group", "5732", _EU, "MID054567890123"),
        Merchant("Zalando", "Zalando", "Zalando SE", "5651", _EU, "MID055678901234"),
        Merchant("Aldi", "Aldi", "ALDI Group", "5411", _EU, "MID057890123456"),
    ),
    "ESP": (
        Merchant("Zara", "Zara", "Inditex SA", "5651", _EU, "MID058901234567"),
        Merchant("El Corte Ingles", "El Corte Ingles", "El Corte Ingles SA", "5311", _EU, "MID059012345678"),
        Merchant("Mercadona", "Mercadona", "Mercadona SA", "5411", _EU, "MID060123456789"),
    ),
    "ITA": (
        Merchant("Esselunga", "Esselunga", "Esselunga SpA", "5411", _EU, "MID062345678901"),
        Merchant("Coop Italia", "Coop", "Coop Italia", "5411", _EU, "MID063456789012"),
        Merchant("Conad", "Conad", "Conad Consorzio Nazionale", "5411", _EU, "MID064567890123"),
    ),
    "NLD": (
        Merchant("Albert Heijn", "Albert Heijn", "Koninklijke Ahold Delhaize NV", "5411", _EU, "MID065678901234"),
        Merchant("Jumbo", "Jumbo", "Jumbo Groep Holding BV", "5411", _EU, "MID066789012345"),
        Merchant("Bol.com", "Bol.com", "Bol.com BV", "5999", _EU, "MID067890123456"),
    ),
    "SWE": (
        Merchant("H&M", "H&M", "H&M Hennes & Mauritz AB", "5651", _EU, "MID068901234567"),
        Merchant("IKEA", "IKEA", "IKEA Group", "5712", _EU, "MID069012345678"),
        Merchant("ICA", "ICA", "ICA Gruppen AB", "5411", _EU, "MID070123456789"),
    ),
    "CHE": (
        Merchant("Migros", "Migros", "Migros-Genossenschafts-Bund", "5411", _EU, "MID072345678901"),
        Merchant("Coop Switzerland", "Coop", "Coop Group", "5411", _EU, "MID073456789012"),
    ),
    "JPN": (
        Merchant("7-Eleven Japan", "7-Eleven", "Seven & i Holdings Co", "5499", _AP, "MID074567890123"),
        Merchant("Uniqlo", "Uniqlo", "Fast Retailing Co Ltd", "5651", _AP, "MID075678901234"),
        Merchant("Lawson", "Lawson", "Lawson Inc", "5499", _AP, "MID076789012345"),
        Merchant("FamilyMart", "FamilyMart", "FamilyMart Co Ltd", "5499", _AP, "MID078901234567"),
    ),
    "AUS": (
        Merchant("Coles", "Coles", "Coles Group Limited", "5411", _AP, "MID080123456789"),
        Merchant("Woolworths", "Woolworths", "Woolworths Group Limited", "5411", _AP, "MID081234567890"),
        Merchant("JB Hi-Fi", "JB Hi-Fi", "JB Hi-Fi Limited", "5732", _AP, "MID082345678901"),
        Merchant("Bunnings", "Bunnings", "Bunnings Group Limited", "5211", _AP, "MID083456789012"),
    ),
    "SGP": (
        Merchant("NTUC FairPrice", "FairPrice", "NTUC FairPrice Co-operative Ltd", "5411", _AP, "MID085678901234"),
        Merchant("Cold Storage", "Cold Storage", "Dairy Farm International", "5411", _AP, "MID087890123456"),
    ),
    "KOR": (
        Merchant("Lotte Mart", "Lotte Mart", "Lotte Shopping Co Ltd", "5411", _AP, "MID088901234567"),
        Merchant("E-Mart", "E-Mart", "Shinsegae Group", "5411", _AP, "MID089012345678"),
    ),
    "BRA": (
        Merchant("Magazine Luiza", "Magalu", "Magazine Luiza SA", "5732", _LA, "MID092345678901"),
        Merchant("Carrefour Brasil", "Carrefour", "Carrefour Brasil", "5411", _LA, "MID093456789012"),
        Merchant("Americanas", "Americanas", "Americanas SA", "5399", _LA, "MID094567890123"),
    ),
    "MEX": (
        Merchant("Soriana", "Soriana", "Organizacion Soriana SAB", "5411", _LA, "MID095678901234"),
        Merchant("Liverpool", "Liverpool", "El Puerto de Liverpool", "5311", _LA, "MID096789012345"),
        Merchant("Walmart Mexico", "Walmart", "Walmart de Mexico", "5411", _LA, "MID097890123456"),
    ),
    "ARG": (
        Merchant("Mercado Libre", "MercadoLibre", "MercadoLibre Inc", "5999", _LA, "MID098901234567"),
        Merchant("Coto", "Coto", "Coto CICSA", "5411", _LA, "MID099012345678"),
    ),
    "CHL": (
        Merchant("Falabella", "Falabella", "S.A.C.I. Falabella", "5311", _LA, "MID101234567890"),
        Merchant("Lider", "Lider", "Walmart Chile", "5411", _LA, "MID102345678901"),
    ),
    "COL": (
        Merchant("Exito", "Exito", "Grupo Exito", "5411", _LA, "MID104567890123"),
        Merchant("Carulla", "Carulla", "Grupo Exito", "5411", _LA, "MID105678901234"),
    ),
    "PER": (
        Merchant("Ripley", "Ripley", "Ripley Corp SA", "5311", _LA, "MID106789012345"),
        Merchant("Plaza Vea", "Plaza Vea", "Supermercados Peruanos SA", "5411", _LA, "MID108901234567"),
    ),
    "ARE": (
        Merchant("Carrefour UAE", "Carrefour", "Majid Al Futtaim Retail", "5411", _MEA, "MID110123456789"),
        Merchant("Lulu Hypermarket", "Lulu", "Lulu Group International", "5411", _MEA, "MID111234567890"),
    ),
    "ZAF": (
        Merchant("Pick n Pay", "Pick n Pay", "Pick n Pay Stores Ltd", "5411", _MEA, "MID114567890123"),
        Merchant("Shoprite", "Shoprite", "Shoprite Holdings Ltd", "5411", _MEA, "MID115678901234"),
    ),
}

FALLBACK_MERCHANTS: Tuple[Merchant, ...] = (
    Merchant("Global Store", "Global Store", "Global Retail Inc", "5999", _NA, "MID999999999999"),
)

CITIES: Dict[str, Tuple[str, ...]] = {
    "USA": ("New York", "Los Angeles", "Chicago", "Houston", "Phoenix"),
    "CAN": ("Toronto", "Vancouver", "Montreal", "Calgary", "Ottawa"),
    "GBR": ("London", "Manchester", "Birmingham", "Liverpool", "Leeds"),
    "DEU": ("Berlin", "Munich", "Hamburg", "Cologne", "Frankfurt"),
    "FRA": ("Paris", "Lyon", "Marseille", "Toulouse", "Nice"),
    "AUS": ("Sydney", "Melbourne", "Brisbane", "Perth", "Adelaide"),
    "JPN": ("Tokyo", "Osaka", "Kyoto", "Yokohama", "Nagoya"),
    "ITA": ("Rome", "Milan", "Naples", "Turin", "Florence"),
    "ESP": ("Madrid", "Barcelona", "Valencia", "Seville", "Bilbao"),
    "NLD": ("Amsterdam", "Rotterdam", "The Hague", "Utrecht", "Eindhoven"),
    "BEL": ("Brussels", "Antwerp", "Ghent", "Charleroi", "Liege"),
    "CHE": ("Zurich", "Geneva", "Basel", "Bern", "Lausanne"),
    "AUT": ("Vienna", "Salzburg", "Innsbruck", "Graz", "Linz"),
    "SWE": ("Stockholm", "Gothenburg", "Malmo", "Uppsala", "Vasteras"),
    "NOR": ("Oslo", "Bergen", "Trondheim", "Stavanger", "Drammen"),
    "DNK": ("Copenhagen", "Aarhus", "Odense", "Aalborg", "Esbjerg"),
    "FIN": ("Helsinki", "Espoo", "Tampere", "Vantaa", "Turku"),
    "IRL": ("Dublin", "Cork", "Limerick", "Galway", "Waterford"),
    "PRT": ("Lisbon", "Porto", "Vila Nova de Gaia", "Amadora", "Braga"),
    "GRC": ("Athens", "Thessaloniki", "Patras", "Heraklion", "Larissa"),
    "POL": ("Warsaw", "Krakow", "Lodz", "Wroclaw", "Poznan"),
    "CZE": ("Prague", "Brno", "Ostrava", "Plzen", "Liberec"),
    "HUN": ("Budapest", "Debrecen", "Szeged", "Miskolc", "Pecs"),
    "SVN": ("Ljubljana", "Maribor", "Celje", "Kranj", "Velenje"),
    "EST": ("Tallinn", "Tartu", "Narva", "Parnu", "Kohtla-Jarve"),
    "LVA": ("Riga", "Daugavpils", "Liepaja", "Jelgava", "Jurmala"),
    "LTU": ("Vilnius", "Kaunas", "Klaipeda", "Siauliai", "Panevezys"),
    "BGR": ("Sofia", "Plovdiv", "Varna", "Burgas", "Ruse"),
    "ROU": ("Bucharest", "Cluj-Napoca", "Timisoara", "Iasi", "Constanta"),
    "HRV": ("Zagreb", "Split", "Rijeka", "Osijek", "Zadar"),
    "MEX": ("Mexico City", "Guadalajara", "Monterrey", "Puebla", "Tijuana"),
    "BRA": ("Sao Paulo", "Rio de Janeiro", "Brasilia", "Salvador", "Fortaleza"),
    "ARG": ("Buenos Aires", "Cordoba", "Rosario", "Mendoza", "La Plata"),
    "CHL": ("Santiago", "Valparaiso", "Concepcion", "La Serena", "Antofagasta"),
    "COL": ("Bogota", "Medellin", "Cali", "Barranquilla", "Cartagena"),
    "PER": ("Lima", "Arequipa", "Trujillo", "Chiclayo", "Huancayo"),
}

DEFAULT_CITIES = CITIES["USA"]

STATES: Dict[str, Tuple[str, ...]] = {
    "USA": ("CA", "NY", "TX", "FL", "IL", "PA", "OH", "GA", "NC", "MI"),
    "CAN": ("ON", "QC", "BC", "AB", "MB", "SK", "NS", "NB", "NL", "PE"),
    "AUS": ("NSW", "VIC", "QLD", "WA", "SA", "TAS", "ACT", "NT"),
    "MEX": ("CDMX", "JAL", "NL", "PUE", "BC", "VER", "GTO", "MICH", "CHIH", "OAX"),
    "BRA": ("SP", "RJ", "MG", "BA", "PR", "RS", "PE", "CE", "PA", "SC"),
    "DEU": ("BY", "BW", "NW", "NI", "HE", "SN", "RP", "TH", "SH", "HH"),
    "ITA": ("LOM", "LAZ", "CAM", "SIC", "VEN", "EMR", "PIE", "PUG", "TOS", "CAL"),
    "ESP": ("AND", "CAT", "MAD", "VAL", "GAL", "CAS", "PVA", "CAN", "MUR", "EXT"),
    "COL": ("BOG", "ANT", "VAL", "ATL", "SAN", "BOL", "CUN", "NOR", "COR", "HUI"),
    "PER": ("LIM", "ARE", "LAL", "LAM", "CUS", "JUN", "PIU", "ANC", "HUC", "ICA"),
}

# Postcode templates: "9" any digit, "1" non-zero digit, "A" letter from the
# country's alphabet. Anything else is copied literally.
_CA_REST = "ABCEGHJKLMNPRSTVWXYZ"
_GB = "ABCDEFGHJKLMNOPQRSTUVWXYZ"
_NL = "ABCDEFGHJKLMNPRSTVWXZ"

POSTCODE_FORMATS: Dict[str, Tuple[str, str]] = {
    "USA": ("19999", ""),
    "CAN": ("A9A 9A9", _CA_REST),
    "GBR": ("AA 99A", _GB),
    "DEU": ("19999", ""),
    "AUT": ("19999", ""),
    "FRA": ("19999", ""),
    "AUS": ("1999", ""),
    "JPN": ("199-1999", ""),
    "ITA": ("19999", ""),
    "ESP": ("19999", ""),
    "NLD": ("1999 AA", _NL),
    "BEL": ("1999", ""),
    "CHE": ("1999", ""),
    "SWE": ("199 19", ""),
    "NOR": ("1999", ""),
    "DNK": ("1999", ""),
    "FIN": ("19999", ""),
    "BRA": ("19999-199", ""),
    "MEX": ("19999", ""),
    "ARG": ("1999", ""),
    "CHL": ("1999999", ""),
    "COL": ("199999", ""),
    "PER": ("19999", ""),
    "PRT": ("1999-199", ""),
    "POL": ("19-199", ""),
    "CZE": ("199 19", ""),
    "HUN": ("1999", ""),
}

DEFAULT_POSTCODE_FORMAT = ("19999", "")

SHIPPING_COUNTRIES: Tuple[str, ...] = (
    "USA", "CAN", "GBR", "DEU", "FRA", "AUS", "JPN", "ITA", "ESP", "NLD", "BEL", "CHE",
    "AUT", "SWE", "NOR", "DNK", "FIN", "IRL", "PRT", "GRC", "POL", "CZE", "HUN", "SVK",
    "SVN", "EST", "LVA", "LTU", "LUX", "MLT", "CYP", "BGR", "ROU", "HRV", "MEX", "BRA",
    "ARG", "CHL", "COL", "PER", "VEN", "URY", "PRY", "BOL", "ECU", "GUY", "SUR", "GUF",
)

CARD_PRODUCTS: Dict[str, Tuple[str, ...]] = {
    "VISA": (
        "CSP", "CSR", "CFU", "CFF", "IHG", "UAX", "CCR", "TRV", "PRM",
        "MLB", "ACT", "AUT", "REF", "VTX", "VT1", "QS1", "SAV",
    ),
    "MASTERCARD": ("CFX", "WOH", "BUS", "CUS", "SEC", "BIZ", "BZP", "SIG", "PLT", "SPK", "QSL", "VEN"),
    "AMEX": ("PLT", "GLD", "GRN", "BBP", "SPG", "HLT", "DLT", "BCP"),
    "DISCOVER": ("IT1", "IT2", "CSH", "STU", "SEC", "CHR"),
}

DEFAULT_CARD_PRODUCTS: Tuple[str, ...] = ("PLT", "SIL", "BRZ", "DMN")

CHARGEBACK_REASON_CODES: Dict[str, Tuple[str, ...]] = {
    "MASTERCARD": ("4855", "4834", "4837", "4863", "4871"),
    "VISA": ("10.4", "11.1", "12.1", "13.1", "13.2"),
    "AMEX": ("C02", "C08", "C14", "C18", "C28"),
    "DISCOVER": ("4554", "4553", "4552", "4550", "4541"),
    "JCB": ("J40", "J41", "J42", "J43", "J44"),
    "DINERS": ("D10", "D11", "D12", "D13", "D14"),
    "UNIONPAY": ("UP01", "UP02", "UP03", "UP04", "UP05"),
}

BRAND_ALIASES: Dict[str, str] = {
    "AMERICAN_EXPRESS": "AMEX",
    "DINERS_CLUB": "DINERS",
}

TRANSACTION_TYPE_CODES: Dict[str, str] = {
    "PURCHASE": "00",
    "CASH_ADVANCE": "01",
    "REFUND": "20",
    "BALANCE_TRANSFER": "40",
    "ADJUSTMENT": "92",
    "FEE": "28",
}

DECLINE_RESPONSE_CODES: Tuple[str, ...] = (
    "51", "61", "05", "79", "82", "83", "04", "14", "33", "41", "43", "54",
    "01", "03", "13", "15", "17", "38", "57", "58", "62", "64", "65", "75",
    "81", "R0", "R1", "R3", "34", "36", "37", "55", "63", "66", "67", "70",
)

USER_AGENTS: Tuple[str, ...] = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (Linux; Android 14; SM-G998B) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Mobile Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/119.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
)

PLACEHOLDER_NAMES: Tuple[str, ...] = (
    "Amazon Marketplace",
    "Walmart Supercenter",
    "Target Corporation",
    "Starbucks Coffee",
    "Shell Gas Station",
    "McDonald's Restaurant",
)

PLACEHOLDER_MESSAGES: Tuple[str, ...] = (
    "APPROVED",
    "DECLINED - INSUFFICIENT FUNDS",
    "EXPIRED CARD",
    "INVALID CVV",
    "SUSPECTED FRAUD",
)


def normalize_brand(brand: str) -> str:
    upper = brand.strip().upper()
    return BRAND_ALIASES.get(upper, upper)


__all__ = [
    "COUNTRY_CURRENCIES",
    "TO_USD",
    "FROM_USD",
    "GENERIC_CURRENCIES",
    "Merchant",
    "MERCHANTS",
    "FALLBACK_MERCHANTS",
    "CITIES",
    "DEFAULT_CITIES",
    "STATES",
    "POSTCODE_FORMATS",
    "DEFAULT_POSTCODE_FORMAT",
    "SHIPPING_COUNTRIES",
    "CARD_PRODUCTS",
    "DEFAULT_CARD_PRODUCTS",
    "CHARGEBACK_REASON_CODES",
    "TRANSACTION_TYPE_CODES",
    "DECLINE_RESPONSE_CODES",
    "USER_AGENTS",
    "PLACEHOLDER_NAMES",
    "PLACEHOLDER_MESSAGES",
    "normalize_brand",
]
