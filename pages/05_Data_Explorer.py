from core import (
    get_theme,
    apply_theme_css,
    get_dataset,
    get_filter_manager,
    get_filtered_data,
    setup_logging,
    show_data_explorer,
)

setup_logging()
theme = get_theme(False)
apply_theme_css(theme)

dataset = get_dataset()
manager = get_filter_manager()
df = get_filtered_data(manager)

show_data_explorer(df, dataset)
