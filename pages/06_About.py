from core import get_theme, apply_theme_css, show_about_page

theme = get_theme(False)
apply_theme_css(theme)

show_about_page()
