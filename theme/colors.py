# theme/colors.py: shared colour constants for all widgets
COLOR_PRIMARY_BG   = "#212121"
COLOR_SECONDARY_BG = "#2d2d2d"
COLOR_TEXT         = "#EEEEEE"
COLOR_TEXT_MUTED   = "#AEAEAE"
COLOR_ACCENT       = "#15B4B9"

# project marker lines (start / end)
COLOR_MARKER       = "#2563EB"
# relative axis labels
COLOR_LABEL_BG     = "#334155"
