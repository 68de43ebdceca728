"""Constants and mappings for the tournament graphic pipeline."""

# Team size for every player
TEAM_SIZE = 6

# Supported tournament sizes
PLAYER_COUNTS = (4, 8, 16, 32, 64)
LAYOUT_SIZES = (16, 64)

EVENT_TYPES = ('Regional', 'Generic', 'International', 'Worlds')
OVERVIEW_TYPES = ('Usage', 'Bracket', 'None')
PLACEMENTS = (1, 2, 3, 4, '5-8', '9-16', '17-24', '25-32', '33-64')
BRACKET_SIDES = ('Winners', 'Losers')
BRACKET_GROUPS = tuple('ABCDEFGHIJKLMNOP')

# Column wrapper ids (base 4 for Top 16, all 10 for Top 64)
BASE_COLUMN_IDS = ('winners1', 'winners2', 'losers1', 'losers2')
COLUMN_IDS_64 = (
    'winners1', 'winners2', 'winners3', 'winners4', 'winners5',
    'losers1', 'losers2', 'losers3', 'losers4', 'losers5',
)
COLUMN_MODES = ('lines', 'wrapper', 'hidden')

# Bracket position slots (1st, 2nd, 3rd, 4th, four 5th-8th)
BRACKET_SLOTS = ('first', 'second', 'third', 'fourth', 'fifth1', 'fifth2', 'fifth3', 'fifth4')

# Usage ranking length
DEFAULT_TOP_N = 12

# Sprite addressing
LOCAL_SPRITE_DIR = '/assets/graphic/pokemons'
LOCAL_SPRITE_EXT = '.svg'
REMOTE_SPRITE_URL = 'https://imagedelivery.net/2qzpDFW7Yl3NqBaOSqBaOSqtWxQ/home_{sid}.png/public'
POKEMON_DATA_URL = 'https://www.dracoviz.com/pokemon.json'

# rk9.gg scraping
RK9_HOST = 'rk9.gg'
RK9_TEAMLIST_PREFIX = '/teamlist-go/public/'
RK9_ROSTER_PREFIX = '/roster/'
RK9_ACCEPT = 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8'
RK9_USER_AGENT = 'Mozilla/5.0 (compatible; TeamListImporter/1.0)'

# CP labels and shadow markers across rk9 page locales
CP_LABELS = {'cp', 'pc', 'pl', 'wp'}
SHADOW_MARKERS = {'shadow', 'obscur', 'ombra', 'crypto', 'oscuro'}

# Regional form qualifiers -> canonical adjective (one per region family).
# Keys are whole qualifiers; "Alola Cap" or "Paldea Combat Breed" are not regions.
REGION_SYNONYMS = {
    'galar': 'galarian',
    'galarian': 'galarian',
    'forma de galar': 'galarian',
    'forme de galar': 'galarian',
    'forma di galar': 'galarian',
    'galar-form': 'galarian',
    'alola': 'alolan',
    'alolan': 'alolan',
    'forma de alola': 'alolan',
    "forme d'alola": 'alolan',
    'forma di alola': 'alolan',
    'alola-form': 'alolan',
    'hisui': 'hisuian',
    'hisuian': 'hisuian',
    'forma de hisui': 'hisuian',
    'forme de hisui': 'hisuian',
    'forma di hisui': 'hisuian',
    'hisui-form': 'hisuian',
    'paldea': 'paldean',
    'paldean': 'paldean',
    'forma de paldea': 'paldean',
    'forme de paldea': 'paldean',
    'forma di paldea': 'paldean',
    'paldea-form': 'paldean',
}

# Forms that must never fall back to the base species sprite.
# Membership is exact (case-insensitive), never substring.
DISTINCT_FORMS = frozenset({
    # Regional
    'galarian', 'alolan', 'hisuian', 'paldean',
    # Mega / primal
    'mega', 'mega x', 'mega y', 'mega_x', 'mega_y', 'primal',
    # Legendary alternate forms
    'origin', 'altered', 'therian', 'incarnate', 'sky', 'land',
    'attack', 'defense', 'speed', 'black', 'white',
    'dusk mane', 'dusk_mane', 'dawn wings', 'dawn_wings', 'ultra',
    'crowned sword', 'crowned_sword', 'crowned shield', 'crowned_shield',
    'hero', 'zero', 'complete', '10', '10%', '50', '50%',
    'single strike', 'single_strike', 'rapid strike', 'rapid_strike',
    'eternamax', 'unbound', 'confined', 'resolute', 'ordinary',
    'aria', 'pirouette', 'shield', 'blade',
    # Cosmetic / type variants
    'sunny', 'rainy', 'snowy', 'plant', 'sandy', 'trash',
    'heat', 'wash', 'frost', 'fan', 'mow',
    'zen', 'galarian zen', 'galarian_zen', 'standard',
    'midday', 'midnight', 'dusk', 'school', 'solo',
    'baile', 'pom pom', 'pom_pom', 'pau', 'sensu',
    'armored', 'burn', 'chill', 'douse', 'shock',
    'full belly', 'full_belly', 'hangry', 'ice', 'noice',
    'male', 'female', 'small', 'average', 'large', 'super',
})

# Country name -> ISO 3166-1 alpha-2
COUNTRY_TO_ISO = {
    # Americas
    'argentina': 'AR',
    'brazil': 'BR',
    'chile': 'CL',
    'colombia': 'CO',
    'costa rica': 'CR',
    'ecuador': 'EC',
    'mexico': 'MX',
    'peru': 'PE',
    'perú': 'PE',
    'uruguay': 'UY',
    'venezuela': 'VE',
    'united states': 'US',
    'usa': 'US',
    'canada': 'CA',
    'puerto rico': 'PR',
    # Europe
    'spain': 'ES',
    'france': 'FR',
    'germany': 'DE',
    'italy': 'IT',
    'united kingdom': 'GB',
    'uk': 'GB',
    'portugal': 'PT',
    'netherlands': 'NL',
    'belgium': 'BE',
    'austria': 'AT',
    'switzerland': 'CH',
    'poland': 'PL',
    'sweden': 'SE',
    'norway': 'NO',
    'denmark': 'DK',
    'finland': 'FI',
    'ireland': 'IE',
    'greece': 'GR',
    'czech republic': 'CZ',
    'czechia': 'CZ',
    'hungary': 'HU',
    'romania': 'RO',
    # Asia Pacific
    'japan': 'JP',
    'south korea': 'KR',
    'korea': 'KR',
    'china': 'CN',
    'taiwan': 'TW',
    'hong kong': 'HK',
    'singapore': 'SG',
    'malaysia': 'MY',
    'thailand': 'TH',
    'philippines': 'PH',
    'indonesia': 'ID',
    'vietnam': 'VN',
    'india': 'IN',
    'australia': 'AU',
    'new zealand': 'NZ',
}

# Non-ISO codes seen in exports and roster pages
COUNTRY_CODE_NORMALIZE = {
    'UK': 'GB',
}

# Known player flags (case-insensitive name match)
PLAYER_FLAG_MAPPINGS = {
    'DHC United': ['HK'],
    'SSthorn': ['CO', 'CA'],
    'Jacoloco2': ['CO', 'CA'],
    '610Hero': ['JP'],
    'MEweedle': ['CH', 'GB'],
    'WooIfpack': ['FR', 'SV'],
    'AdibKhan': ['BA'],
    'hkassasin': ['HK', 'GB'],
    'LurganRocket': ['IE'],
    'Jinz': ['AU', 'JP'],
    'Abhinav': ['US', 'IN'],
    'Walker': ['TW'],
    'Ilqm': ['CR'],
    'AshtonAsh': ['US', 'MX'],
    'Joeddy12': ['PR'],
}

# Type preferences per team slot, in priority order (team sorter)
SLOT_TYPE_PREFERENCES = [
    ['ground', 'grass'],
    ['steel', 'poison'],
    ['dragon', 'flying', 'normal', 'bug'],
    ['flying', 'fairy', 'psychic'],
    [],
    [],
]
