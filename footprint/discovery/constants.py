# -*- coding: utf-8 -*-
"""
footprint/discovery/constants.py
File classification rules, name-resolution rules and metadata constants.
"""

# --- File classification by extension ---
MANAGED_EXTENSIONS = ('.dll', '.exe')
DEBUG_EXTENSIONS = ('.mdb',)
IGNORED_EXTENSIONS = ('.la', '.a')      # libtool archives and static libraries

# --- Native library name variants, tried in order per search directory ---
NATIVE_NAME_PATTERNS = (
    '{0}',
    '{0}.so',
    'lib{0}',
    'lib{0}.so',
)

# --- Library map (dllmap) ---
DLLMAP_ROOT_TAG = 'configuration'
DLLMAP_ELEMENT = 'dllmap'
DLLMAP_OS_MATCHES = ('', 'linux', '!windows')
ASSEMBLY_CONFIG_SUFFIX = '.config'

# --- Linker configuration ---
LD_CONFIG_INCLUDE = 'include '

# --- Link inspector output ---
LDD_ADDRESS_MARKER = '('
LDD_MAPPING_MARKER = ' => '

# --- CLI metadata ---
NEUTRAL_CULTURE = 'neutral'
NULL_PUBLIC_KEY_TOKEN = 'null'
