"""
End-to-end tests for the translation pipeline

SQL text in, Go source out, through every stage.
"""

import io

import pytest

from gorm_auto_generator.config_validation import build_options
from gorm_auto_generator.exceptions import (
    GormAutoGeneratorError,
    NamingCollisionError,
    SchemaError,
    SqlSyntaxError,
    UnsupportedTypeError,
)
from gorm_auto_generator.pipeline import build_structs, parse_schema, translate, translate_to_stream


ORDER_DDL = """
CREATE TABLE `t_order` (
  `id` bigint NOT NULL AUTO_INCREMENT,
  `user_id` bigint NOT NULL,
  `remark` varchar(255) DEFAULT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

EXPECTED_ORDER_SOURCE = (
    "package model\n"
    "\n"
    "import (\n"
    '\t"database/sql"\n'
    ")\n"
    "\n"
    "type Order struct {\n"
    '\tID     int64          `gorm:"column:id;primary_key;AUTO_INCREMENT;NOT NULL" json:"id"`\n'
    '\tUserID int64          `gorm:"column:user_id;NOT NULL" json:"user_id"`\n'
    '\tRemark sql.NullString `gorm:"column:remark" json:"remark"`\n'
    "}\n"
    "\n"
    "func (m *Order) TableName() string {\n"
    '\treturn "t_order"\n'
    "}\n"
)


@pytest.fixture
def order_options():
    return build_options(table_prefix="t_", json_tag=True)


def test_order_table_end_to_end(order_options):
    assert translate(ORDER_DDL, order_options) == EXPECTED_ORDER_SOURCE


def test_translate_is_deterministic(order_options):
    assert translate(ORDER_DDL, order_options) == translate(ORDER_DDL, order_options)


def test_field_order_follows_columns(order_options):
    struct = build_structs(ORDER_DDL, order_options)[0]
    assert [field.column_name for field in struct.fields] == ["id", "user_id", "remark"]


def test_pointer_null_style():
    struct = build_structs(ORDER_DDL, build_options(null_style="ptr"))[0]
    assert struct.fields[2].go_type == "*string"
    assert struct.imports == frozenset()


def test_no_null_type():
    source = translate(ORDER_DDL, build_options(no_null_type=True))
    assert "Remark string" in source
    assert "import" not in source


def test_custom_package():
    source = translate(ORDER_DDL, build_options(package="dao"))
    assert source.startswith("package dao\n")


def test_with_type_keeps_sql_type():
    source = translate(ORDER_DDL, build_options(with_type=True))
    assert "type:VARCHAR(255)" in source


def test_time_and_unsigned_columns():
    ddl = """
    CREATE TABLE users (
      id INT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,
      balance BIGINT UNSIGNED DEFAULT NULL,
      created_at DATETIME NOT NULL,
      deleted_at DATETIME DEFAULT NULL,
      avatar BLOB
    )
    """
    struct = build_structs(ddl, build_options())[0]
    assert [f.go_type for f in struct.fields] == [
        "uint32", "*uint64", "time.Time", "sql.NullTime", "[]byte"
    ]
    assert struct.imports == frozenset({"time", "database/sql"})
    assert struct.emit_table_name is False


def test_multiple_tables_share_one_package_clause():
    ddl = "CREATE TABLE a_items (id INT NOT NULL); CREATE TABLE b_items (id INT NOT NULL);"
    source = translate(ddl, build_options())
    assert source.count("package model") == 1
    assert source.index("type AItems struct") < source.index("type BItems struct")


def test_schema_is_resolved(order_options):
    table = parse_schema(ORDER_DDL, order_options)[0]
    assert table.get_column_by_name("id").is_pk
    assert table.get_column_by_name("remark").nullable


def test_column_collision():
    ddl = "CREATE TABLE t (user_name VARCHAR(10), userName VARCHAR(10))"
    with pytest.raises(NamingCollisionError):
        translate(ddl, build_options())


def test_unsupported_type():
    with pytest.raises(UnsupportedTypeError) as exc_info:
        translate("CREATE TABLE t (id INT NOT NULL, area GEOMETRY)", build_options())
    assert exc_info.value.sql_type == "GEOMETRY"


@pytest.mark.parametrize(
    "column_type, go_type",
    [
        ("TINYINT(1)", "int8"),
        ("INT1", "int8"),
        ("SMALLINT UNSIGNED", "uint16"),
        ("INT2", "int16"),
        ("MEDIUMINT", "int32"),
        ("INT3", "int32"),
        ("INT(11) UNSIGNED", "uint32"),
        ("INT4", "int32"),
        ("BIGINT(20)", "int64"),
        ("INT8", "int64"),
        ("BIGINT UNSIGNED", "uint64"),
        ("SERIAL", "uint64"),
        ("DECIMAL(10,2)", "float64"),
        ("DECIMAL(10,2) UNSIGNED", "float64"),
        ("FLOAT", "float32"),
        ("FLOAT UNSIGNED", "float32"),
        ("DOUBLE", "float64"),
        ("DOUBLE UNSIGNED", "float64"),
        ("BOOL", "bool"),
        ("YEAR", "int16"),
        ("CHAR(2)", "string"),
        ("VARCHAR(64)", "string"),
        ("TEXT", "string"),
        ("LONGTEXT", "string"),
        ("ENUM('a','b')", "string"),
        ("SET('a','b')", "string"),
        ("JSON", "string"),
        ("TIME", "string"),
        ("DATE", "time.Time"),
        ("DATETIME(6)", "time.Time"),
        ("TIMESTAMP", "time.Time"),
        ("BIT(1)", "[]byte"),
        ("BINARY(16)", "[]byte"),
        ("VARBINARY(64)", "[]byte"),
        ("LONGBLOB", "[]byte"),
    ],
)
def test_mysql_type_spellings(column_type, go_type):
    struct = build_structs(f"CREATE TABLE items (c {column_type} NOT NULL)", build_options())[0]
    assert struct.fields[0].go_type == go_type


@pytest.mark.parametrize(
    "column_type", ["FOOBAR", "GEOMETRY", "POINT", "POLYGON", "LINESTRING", "MULTIPOINT", "GEOMETRYCOLLECTION"]
)
def test_unmapped_type_words_are_unsupported_not_syntax_errors(column_type):
    with pytest.raises(UnsupportedTypeError) as exc_info:
        translate(f"CREATE TABLE t (id INT NOT NULL, c {column_type})", build_options())
    assert exc_info.value.sql_type == column_type
    assert exc_info.value.context["column"] == "c"


def test_float_unsigned_from_show_create_table():
    source = translate("CREATE TABLE t (`ratio` float unsigned DEFAULT NULL)", build_options())
    assert "Ratio sql.NullFloat64" in source


def test_serial_column_tags():
    struct = build_structs("CREATE TABLE items (id SERIAL)", build_options())[0]
    assert struct.fields[0].go_type == "uint64"
    assert struct.fields[0].tag == 'gorm:"column:id;unique;AUTO_INCREMENT;NOT NULL"'


@pytest.mark.parametrize(
    "ddl",
    [
        "CREATE TABLE t (id INT NOT NULL,, name VARCHAR(10))",
        "CREATE TABLE t (id INT NOT NULL,)",
    ],
)
def test_empty_column_definition(ddl):
    with pytest.raises(SqlSyntaxError) as exc_info:
        translate(ddl, build_options())
    assert exc_info.value.line == 1


def test_table_name_column_with_accessor():
    ddl = "CREATE TABLE t_x (id INT, table_name VARCHAR(10))"
    with pytest.raises(NamingCollisionError):
        translate(ddl, build_options(table_prefix="t_"))


def test_json_name_of_spaced_column():
    source = translate("CREATE TABLE items (`a b` INT NOT NULL)", build_options(json_tag=True))
    assert 'json:"a_b"' in source


def test_malformed_sql():
    with pytest.raises(SqlSyntaxError):
        translate("CREATE TABLE t (id INT", build_options())


@pytest.mark.parametrize("sql_text", ["", "DROP TABLE t;", "SELECT 1;"])
def test_no_create_table(sql_text):
    with pytest.raises(SchemaError):
        translate(sql_text, build_options())


def test_stream_gets_nothing_on_failure():
    ddl = ORDER_DDL + "CREATE TABLE broken (id INT NOT NULL, area GEOMETRY);"
    stream = io.StringIO()
    with pytest.raises(GormAutoGeneratorError):
        translate_to_stream(ddl, build_options(), stream)
    assert stream.getvalue() == ""


def test_stream_receives_full_source(order_options):
    stream = io.StringIO()
    returned = translate_to_stream(ORDER_DDL, order_options, stream)
    assert stream.getvalue() == returned == EXPECTED_ORDER_SOURCE
