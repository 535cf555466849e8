from enum import Enum


class Theme(Enum):
    """Named colour schemes the user can pick from the settings screen."""

    # name, primary, secondary, accent, gradient_start, gradient_end
    OCEAN = ("Ocean Blue", "#00b4db", "#0083b0", "#00d4ff", "#0f2027", "#2c5364")
    SUNSET = ("Sunset Orange", "#ff6b6b", "#ee5a6f", "#ff8787", "#ff6b6b", "#c44569")
    FOREST = ("Forest Green", "#11998e", "#38ef7d", "#06d6a0", "#134e4a", "#14532d")
    NIGHT = ("Midnight Purple", "#667eea", "#764ba2", "#8b5cf6", "#1e1b4b", "#312e81")
    ROSE = ("Rose Pink", "#ec4899", "#be185d", "#f472b6", "#831843", "#500724")
    CYBER = ("Cyber Teal", "#06b6d4", "#0891b2", "#22d3ee", "#164e63", "#083344")

    def __init__(self, display_name, primary, secondary, accent, gradient_start, gradient_end):
        self.display_name = display_name
        self.primary = primary
        self.secondary = secondary
        self.accent = accent
        self.gradient_start = gradient_start
        self.gradient_end = gradient_end

    @classmethod
    def default(cls) -> 'Theme':
        return cls.OCEAN

    @classmethod
    def from_name(cls, name: str) -> 'Theme':
        for theme in cls:
            if theme.display_name == name:
                return theme
        return cls.default()

    def __str__(self):
        return self.display_name
