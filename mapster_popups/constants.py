"""
Shared constants for the Mapster popup generator
"""

# Post type and taxonomy registered by the Mapster WP Maps plugin
LOCATION_POST_TYPE = 'mapster-wp-location'
CATEGORY_TAXONOMY = 'wp-map-category'
DEFAULT_CATEGORY_SLUG = 'haendler'

# Value the trigger flag must carry for a run to start
TRIGGER_VALUE = 'yes'

# Capability the WordPress user needs (administrators have it)
REQUIRED_CAPABILITY = 'manage_options'

# Records file shipped next to the plugin
DEFAULT_DATA_FILE = 'output_converted.json'

# Popup defaults written into every location
DEFAULT_POPUP_STYLE_ID = 667
DEFAULT_POPUP_IMAGE_SOURCE = 'feature-image'
DEFAULT_POPUP_BUTTON_ACTION = 'to-directions'
DEFAULT_POPUP_OPEN_TRIGGER = 'click'
DEFAULT_POPUP_BUTTON_TEXT = 'Zum Händler'

# Semantic role -> ACF field key of the Mapster popup field group.
# The popup_fields group nests the last six roles.
DEFAULT_ACF_FIELD_KEYS = {
    'enable_popup': 'field_616a60c610c96',
    'popup_style': 'field_616a145a4f1eb',
    'popup_fields': 'field_6168d546268fb',
    'header': 'field_6169fc8a6e649',
    'image': 'field_61db0c22f9454',
    'body': 'field_6169fc9c6e64a',
    'button_action': 'field_6169fda56e64f',
    'trigger': 'field_616a60fd2218f',
    'button_text': 'field_6169fcbc6e64c',
}

POPUP_GROUP_ROLES = [
    'header',
    'image',
    'body',
    'button_action',
    'trigger',
    'button_text',
]

ACF_FIELD_ROLES = ['enable_popup', 'popup_style', 'popup_fields'] + POPUP_GROUP_ROLES
