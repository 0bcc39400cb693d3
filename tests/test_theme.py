import unittest

from interface.tui_themes import DEFAULT_THEME, THEMES, build_style, get_theme_palette


REQUIRED_KEYS = {
    "",
    "text",
    "text.dim",
    "header",
    "header.active",
    "border",
    "border.selected",
    "selected",
    "tag.project",
    "tag.context",
    "tag.meta",
    "done",
    "error",
    "error.text",
    "status",
    "prompt",
    "table.header",
}


class ThemeTests(unittest.TestCase):
    def test_all_themes_have_required_keys(self):
        for name in THEMES.keys():
            palette = get_theme_palette(name)
            missing = REQUIRED_KEYS - set(palette.keys())
            self.assertFalse(missing, f"theme {name} missing {missing}")

    def test_unknown_theme_falls_back_to_default(self):
        palette_default = get_theme_palette(DEFAULT_THEME)
        palette_unknown = get_theme_palette("non-existent")
        self.assertEqual(palette_unknown, palette_default)
        self.assertIsNot(palette_unknown, palette_default)

    def test_style_builds_without_errors(self):
        for name in THEMES.keys():
            style = build_style(name)
            self.assertTrue(getattr(style, "style_rules", None))


if __name__ == "__main__":
    unittest.main()
