"""
Configuration settings for the captions module.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Speaking rate assumed when only a flat transcript is available
WORDS_PER_MINUTE = float(os.getenv("CAPTIONS_WORDS_PER_MINUTE", "150"))

# Script resolution (9:16 portrait video)
PLAY_RES_X = int(os.getenv("CAPTIONS_PLAY_RES_X", "1080"))
PLAY_RES_Y = int(os.getenv("CAPTIONS_PLAY_RES_Y", "1920"))

DEFAULT_PRESET = os.getenv("CAPTIONS_DEFAULT_PRESET", "bold-white")

# Decimal places kept on computed word times (milliseconds)
TIME_PRECISION = 3

# Vertical position label <-> percent
POSITION_ANCHORS = {"top": 20.0, "center": 50.0, "bottom": 70.0}
TOP_MAX_PERCENT = 33.0
CENTER_MAX_PERCENT = 66.0

# Horizontal margins of the style record
MARGIN_L = 40
MARGIN_R = 40
