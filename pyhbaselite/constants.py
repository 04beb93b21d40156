"""Store-wide constants shared by cells, mutations and the REST client."""

# longest row key the store accepts
MAX_ROW_LENGTH = 32767

LATEST_TIMESTAMP = 2 ** 63 - 1
OLDEST_TIMESTAMP = -(2 ** 63)

EMPTY_BYTE_ARRAY = b""
EMPTY_START_ROW = EMPTY_BYTE_ARRAY
EMPTY_END_ROW = EMPTY_BYTE_ARRAY

ALL_VERSIONS = 2 ** 31 - 1

# separates family from qualifier in a REST column spec
COLUMN_FAMILY_DELIMITER = b":"

# separates the parts of a catalog table row (table,startkey,regionid)
CATALOG_DELIMITER = b","

DEFAULT_NAMESPACE_NAME = "default"
SYSTEM_NAMESPACE_NAME = "hbase"
NAMESPACE_DELIMITER = ":"
META_TABLE_QUALIFIER = "meta"
META_TABLE_NAME = f"{SYSTEM_NAMESPACE_NAME}{NAMESPACE_DELIMITER}{META_TABLE_QUALIFIER}"
