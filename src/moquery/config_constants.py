from enum import Enum


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"

class OLLAMA_LLM_MODELS(str, Enum):
    # Meta Llama models
    LLAMA_31 = "llama3.1"
    LLAMA_32 = "llama3.2"

    # SQL-tuned models
    SQLCODER = "sqlcoder"
    DUCKDB_NSQL = "duckdb-nsql"

    # Qwen models
    QWEN_25_CODER = "qwen2.5-coder"

class GraphicsProtocol(str, Enum):
    AUTO = "auto"
    KITTY = "kitty"
    ITERM = "iterm"
    NONE = "none"

OLLAMA_API_URL = "http://localhost:11434/v1"

# -------------------------
# Schema Introspection Constants
# -------------------------

# MySQL-compatible introspection statements (MySQL, MariaDB, MatrixOne, TiDB)
MYSQL_DATABASE_NAME_QUERY = "select database()"
MYSQL_LIST_TABLES_QUERY = "show tables"
MYSQL_SHOW_CREATE_TABLE_TEMPLATE = "show create table `{table}`"
