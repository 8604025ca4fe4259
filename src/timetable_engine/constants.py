"""Constants for course matching."""

# Stopwords dropped by normalize_title(remove_stopwords=True)
TITLE_STOPWORDS = ["THE", "AND", "OF", "A", "AN", "IN", "ON", "AT", "TO", "FOR"]

# Abbreviations expanded before similarity scoring
TITLE_ABBREVIATIONS = {
    "INTRO": "INTRODUCTION",
    "INTROD": "INTRODUCTION",
    "FUND": "FUNDAMENTALS",
    "FUNDAMENTAL": "FUNDAMENTALS",
    "PRIN": "PRINCIPLES",
    "PRINC": "PRINCIPLES",
    "ADV": "ADVANCED",
    "ELEM": "ELEMENTARY",
    "GEN": "GENERAL",
    "MGT": "MANAGEMENT",
    "MGMT": "MANAGEMENT",
    "ENGR": "ENGINEERING",
    "MATH": "MATHEMATICS",
    "STATS": "STATISTICS",
    "STAT": "STATISTICS",
    "COMP": "COMPUTER",
    "SCI": "SCIENCE",
    "LAB": "LABORATORY",
    "APPL": "APPLIED",
    "&": "AND",
    "I": "1",
    "II": "2",
    "III": "3",
}

# Similarity blend
JACCARD_WEIGHT = 0.6
TRIGRAM_WEIGHT = 0.4
DEPARTMENT_BONUS = 0.02

# Matching thresholds
AUTO_MATCH_THRESHOLD = 0.92
REVIEW_THRESHOLD = 0.80

# Number of suggestions kept for the review queue
MAX_SUGGESTIONS = 5

# Alias confidence by source
AUTO_ALIAS_CONFIDENCE = 0.9
MANUAL_ALIAS_CONFIDENCE = 1.0

# Offering types accepted on import
VALID_OFFERING_TYPES = {"lecture", "lab", "tutorial"}
