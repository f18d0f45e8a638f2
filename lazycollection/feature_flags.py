import sys
from lazycollection.common.environments import flag

in_global_debug_mode = flag('LAZYCOLLECTION_DEBUG',
                            description='Enable the debug mode')
in_interactive_shell = sys.__stdout__ and sys.__stdout__.isatty()
cli_show_list_item_index = flag('LAZYCOLLECTION_SHOW_LIST_ITEM_INDEX',
                                description='The CLI output will show the index number of items in any list output')
