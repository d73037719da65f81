# tests/test_validators.py
"""Unit tests for input validators and the MySQL dump parser."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dealership.utils.validators import blank_to_none, clean_phone, is_digits, is_valid_name, is_valid_phone
from dealership.utils.sql_dump import parse_vehicle_inserts, to_vehicle_fields, unescape


class TestValidators:
    def test_names(self):
        assert is_valid_name("Jean")
        assert is_valid_name("Éloïse D'Arc-Martin")
        assert not is_valid_name("R2D2")
        assert not is_valid_name("")
        assert not is_valid_name(None)

    def test_phone_is_stripped_to_digits(self):
        assert clean_phone("06 01-02.03 04") == "0601020304"
        assert is_valid_phone("555-0123 4")
        assert not is_valid_phone("555-012")

    def test_digits_only(self):
        assert is_digits("12345")
        assert is_digits(" 42 ")
        assert not is_digits("12a45")
        assert not is_digits("")

    def test_only_ascii_digits_count(self):
        assert not is_digits("١٢٣٤٥")
        assert clean_phone("١٢٣٤٥٦٧٨") == ""
        assert not is_valid_phone("١٢٣٤٥٦٧٨")

    def test_blank_to_none(self):
        assert blank_to_none("  ") is None
        assert blank_to_none(" Pegassi ") == "Pegassi"
        assert blank_to_none(None) is None


DUMP = """
-- MySQL dump
DROP TABLE IF EXISTS `vehicles`;
INSERT INTO `vehicles` (`name`, `category`, `price`, `trunk_weight`, `image_url`, `seats`, `particularity`) VALUES ('Adder', 'Super', 1000000, 50, 'https://img/adder.png', 2, NULL);
INSERT INTO `vehicles` (`name`, `category`, `price`, `trunk_weight`, `image_url`, `seats`, `particularity`) VALUES ('Sultan (RS)', 'Sports', 250000, 80, 'https://img/sultan.png', 4, 'Tuning'), ('Jester\\'s Classic', 'Sports classics', 790000, 40, 'https://img/jester.png', 2, NULL);
INSERT INTO `other` (`x`) VALUES (1);
"""


class TestSqlDump:
    def test_parses_every_row(self):
        rows = parse_vehicle_inserts(DUMP)
        assert [r["name"] for r in rows] == ["Adder", "Sultan (RS)", "Jester's Classic"]

    def test_types(self):
        adder = parse_vehicle_inserts(DUMP)[0]
        assert adder["price"] == 1000000
        assert adder["seats"] == 2
        assert adder["particularity"] is None

    def test_other_tables_ignored(self):
        assert all("x" not in r for r in parse_vehicle_inserts(DUMP))

    def test_column_order_follows_statement(self):
        sql = "INSERT INTO `vehicles` (`price`, `name`) VALUES (10, 'Faggio');"
        assert parse_vehicle_inserts(sql) == [{"price": 10, "name": "Faggio"}]

    def test_unescape(self):
        assert unescape("it\\'s") == "it's"
        assert unescape("a''b") == "a'b"
        assert unescape("line\\nbreak") == "line\nbreak"

    def test_to_vehicle_fields_drops_unknown_columns(self):
        assert to_vehicle_fields({"id": 3, "name": "Adder", "stock": 9}) == {"name": "Adder"}
