from core import (
    get_theme,
    apply_theme_css,
    get_filter_manager,
    get_filtered_data,
    setup_logging,
    show_demographics,
)

setup_logging()
theme = get_theme(False)
apply_theme_css(theme)

manager = get_filter_manager()
df = get_filtered_data(manager)

show_demographics(theme, df, manager)
