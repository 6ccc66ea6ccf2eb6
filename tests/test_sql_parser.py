"""
Tests for the SQL DDL parser

Covers column and table level declarations extracted from MySQL
CREATE TABLE statements and the syntax error reporting.
"""

from unittest import TestCase

from gorm_auto_generator.exceptions import SqlSyntaxError
from gorm_auto_generator.schema_builder import split_unsigned
from gorm_auto_generator.sql_parser import parse_create_tables


ORDER_DDL = """
CREATE TABLE `t_order` (
  `id` bigint NOT NULL AUTO_INCREMENT,
  `user_id` bigint NOT NULL,
  `status` int NOT NULL DEFAULT 0,
  `remark` varchar(255) DEFAULT NULL COMMENT 'order remark',
  `created_at` datetime NOT NULL DEFAULT CURRENT_TIMESTAMP,
  PRIMARY KEY (`id`),
  UNIQUE KEY `uk_user` (`user_id`),
  KEY `idx_status` (`status`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='orders';
"""


class TestParseCreateTables(TestCase):
    """Test cases for parse_create_tables"""

    def setUp(self):
        self.table = parse_create_tables(ORDER_DDL)[0]

    def test_table_name_and_column_order(self):
        """Columns keep their declaration order"""
        assert self.table.name == "t_order"
        assert [c.name for c in self.table.columns] == [
            "id", "user_id", "status", "remark", "created_at"
        ]

    def test_not_null_and_auto_increment(self):
        id_column = self.table.columns[0]
        assert id_column.not_null is True
        assert id_column.auto_increment is True
        assert id_column.type_name == "BIGINT"

    def test_default_null_and_comment(self):
        remark = self.table.columns[3]
        assert remark.not_null is False
        assert remark.default_is_null is True
        assert remark.default is None
        assert remark.comment == "order remark"
        assert remark.type_params == ("255",)

    def test_literal_and_expression_defaults(self):
        assert self.table.columns[2].default == "0"
        assert self.table.columns[4].default.upper().startswith("CURRENT_TIMESTAMP")

    def test_keys(self):
        assert self.table.primary_key == ("id",)
        assert [key.columns for key in self.table.unique_keys] == [("user_id",)]
        assert [key.columns for key in self.table.indexes] == [("status",)]

    def test_table_options(self):
        assert self.table.engine == "InnoDB"
        assert self.table.charset == "utf8mb4"
        assert self.table.comment == "orders"


class TestColumnLevelKeys(TestCase):
    """Inline PRIMARY KEY / UNIQUE are folded into the table keys"""

    def test_inline_primary_key(self):
        table = parse_create_tables("CREATE TABLE t (id INT PRIMARY KEY, name VARCHAR(10))")[0]
        assert table.primary_key == ("id",)

    def test_inline_unique(self):
        table = parse_create_tables(
            "CREATE TABLE t (id INT NOT NULL, email VARCHAR(64) NOT NULL UNIQUE)"
        )[0]
        assert [key.columns for key in table.unique_keys] == [("email",)]

    def test_foreign_key_metadata(self):
        table = parse_create_tables(
            "CREATE TABLE t (id INT NOT NULL, user_id INT NOT NULL, "
            "CONSTRAINT fk_user FOREIGN KEY (user_id) REFERENCES users (id))"
        )[0]
        assert len(table.foreign_keys) == 1
        fk = table.foreign_keys[0]
        assert fk.columns == ("user_id",)
        assert fk.referenced_table == "users"
        assert fk.referenced_columns == ("id",)


class TestUnsignedTypes(TestCase):

    def test_unsigned_integer_is_a_distinct_type(self):
        table = parse_create_tables("CREATE TABLE t (id INT UNSIGNED NOT NULL)")[0]
        assert table.columns[0].type_name == "UINT"

    def test_bigint_unsigned(self):
        table = parse_create_tables("CREATE TABLE t (id BIGINT UNSIGNED NOT NULL)")[0]
        assert table.columns[0].type_name == "UBIGINT"


class TestStatementSelection(TestCase):
    """Non CREATE TABLE statements are ignored"""

    def test_skips_other_statements(self):
        tables = parse_create_tables(
            "DROP TABLE IF EXISTS t; CREATE TABLE t (id INT); INSERT INTO t VALUES (1);"
        )
        assert [table.name for table in tables] == ["t"]

    def test_multiple_tables_in_source_order(self):
        tables = parse_create_tables("CREATE TABLE b (id INT); CREATE TABLE a (id INT);")
        assert [table.name for table in tables] == ["b", "a"]

    def test_no_tables(self):
        assert parse_create_tables("DROP TABLE t;") == []


class TestSyntaxErrors(TestCase):

    def test_unterminated_column_list(self):
        with self.assertRaises(SqlSyntaxError) as ctx:
            parse_create_tables("CREATE TABLE t (id INT")
        assert ctx.exception.error_code == "SQL_SYNTAX_ERROR"

    def test_error_carries_position(self):
        with self.assertRaises(SqlSyntaxError) as ctx:
            parse_create_tables("CREATE TABLE t (id INT")
        assert ctx.exception.line == 1
        assert ctx.exception.message.startswith("SQL syntax error at line 1")


class TestMySQLTypeSpellings(TestCase):
    """Type words that need the MySQL DDL dialect"""

    def _type_name(self, column_sql):
        return parse_create_tables(f"CREATE TABLE t ({column_sql})")[0].columns[0].type_name

    def test_float_unsigned(self):
        column = parse_create_tables("CREATE TABLE t (`ratio` float unsigned DEFAULT NULL)")[0].columns[0]
        assert split_unsigned(column.type_name) == ("FLOAT", True)
        assert column.type_sql.endswith("UNSIGNED")

    def test_decimal_and_double_unsigned(self):
        assert split_unsigned(self._type_name("price DECIMAL(10,2) UNSIGNED")) == ("DECIMAL", True)
        assert split_unsigned(self._type_name("ratio DOUBLE UNSIGNED")) == ("DOUBLE", True)

    def test_signed_float_is_unchanged(self):
        column = parse_create_tables("CREATE TABLE t (ratio FLOAT NOT NULL)")[0].columns[0]
        assert column.type_name == "FLOAT"
        assert "UNSIGNED" not in column.type_sql

    def test_integer_byte_width_aliases(self):
        assert self._type_name("a INT1") == "TINYINT"
        assert self._type_name("a INT2") == "SMALLINT"
        assert self._type_name("a INT3") == "MEDIUMINT"
        assert self._type_name("a INT4") == "INT"
        assert self._type_name("a INT8") == "BIGINT"

    def test_unknown_type_word_is_kept(self):
        assert self._type_name("c FOOBAR") == "FOOBAR"
        assert self._type_name("c GEOMETRYCOLLECTION NOT NULL") == "GEOMETRYCOLLECTION"

    def test_serial(self):
        assert self._type_name("id SERIAL") == "SERIAL"


class TestEmptyListItems(TestCase):
    """sqlglot drops empty definitions; MySQL rejects them"""

    def test_double_comma(self):
        with self.assertRaises(SqlSyntaxError) as ctx:
            parse_create_tables("CREATE TABLE t (id INT NOT NULL,, name VARCHAR(10))")
        assert ctx.exception.line == 1
        assert ctx.exception.column is not None
        assert "unexpected ','" in ctx.exception.message

    def test_trailing_comma(self):
        with self.assertRaises(SqlSyntaxError) as ctx:
            parse_create_tables("CREATE TABLE t (id INT NOT NULL,)")
        assert "unexpected ')'" in ctx.exception.message

    def test_leading_comma(self):
        with self.assertRaises(SqlSyntaxError):
            parse_create_tables("CREATE TABLE t (, id INT NOT NULL)")

    def test_reports_the_line_of_the_empty_item(self):
        sql = "CREATE TABLE a (id INT);\nCREATE TABLE t (\n  id INT,\n  ,name INT\n)"
        with self.assertRaises(SqlSyntaxError) as ctx:
            parse_create_tables(sql)
        assert ctx.exception.line == 4

    def test_empty_parentheses_in_defaults_are_fine(self):
        table = parse_create_tables(
            "CREATE TABLE t (id INT, created_at DATETIME DEFAULT NOW(), "
            "state ENUM('a','b'), KEY idx (id, state))"
        )[0]
        assert [column.name for column in table.columns] == ["id", "created_at", "state"]
