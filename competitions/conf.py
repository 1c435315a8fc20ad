from django.conf import settings

THIRD_PLACE_MATCH_NUMBER = getattr(settings, "COMPETITIONS_THIRD_PLACE_MATCH_NUMBER", 9999)
WIN_POINTS = getattr(settings, "COMPETITIONS_WIN_POINTS", 3)
SERIES_LENGTH = getattr(settings, "COMPETITIONS_SERIES_LENGTH", 3)
SERIES_WINS_NEEDED = SERIES_LENGTH // 2 + 1
