# Directive prefixes, recognized only at column 0 of a line
GNUPLOT_HINT = "--!gnuplot"
TEXT2SQL_HINT = "--!text2sql"
SQL_HINT = "--!sql"
COMMENT_MARKER = "--"

STATEMENT_TERMINATOR = ";"
