# ========================
# tests/test_ingestion.py
# ========================

import unittest
import tempfile
import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ev_insights.pipeline.ingestion import CSVReader, VehicleCSVParser, parse_csv_data, split_fields
from ev_insights.pipeline.records import VehicleType

HEADER = ("VIN (1-10),County,City,State,Postal Code,Model Year,Make,Model,"
          "Electric Vehicle Type,Clean Alternative Fuel Vehicle (CAFV) Eligibility,"
          "Electric Range,Base MSRP,Legislative District,Electric Utility")

QUOTED_ROW = ('VIN1,King,"Seattle, Area",WA,98101,2022,Tesla,Model 3,'
              'Battery Electric Vehicle (BEV),Clean Alternative Fuel Vehicle Eligible,'
              '250,40000,43,City Light')


class TestFieldSplitting(unittest.TestCase):
    """Test tokenising a single physical line."""

    def test_quoted_comma_is_data(self):
        values = split_fields(QUOTED_ROW)
        self.assertEqual(len(values), 14)
        self.assertEqual(values[2], 'Seattle, Area')

    def test_fields_are_stripped(self):
        self.assertEqual(split_fields(' a , b ,c '), ['a', 'b', 'c'])

    def test_doubled_quote_is_unescaped(self):
        values = split_fields('x,"The ""Big"" One",y')
        self.assertEqual(values, ['x', 'The "Big" One', 'y'])

    def test_empty_trailing_field(self):
        self.assertEqual(split_fields('a,b,'), ['a', 'b', ''])

    def test_space_before_quoted_field(self):
        values = split_fields('V1,King, "Seattle, Area",WA,98101')
        self.assertEqual(values, ['V1', 'King', 'Seattle, Area', 'WA', '98101'])

    def test_quote_in_middle_of_field(self):
        values = split_fields('V1,Model "3, Long",x')
        self.assertEqual(values, ['V1', 'Model 3, Long', 'x'])

    def test_empty_quoted_field(self):
        self.assertEqual(split_fields('a,"",b'), ['a', '', 'b'])

    def test_unterminated_quote_consumes_rest_of_line(self):
        self.assertEqual(split_fields('a,"b,c,d'), ['a', 'b,c,d'])


class TestRecordParser(unittest.TestCase):
    """Test parsing raw CSV text into vehicle records."""

    def test_quoted_field_row(self):
        """A quoted city containing a comma parses into one BEV record."""
        text = "\n".join([HEADER, QUOTED_ROW, ""])

        records = parse_csv_data(text)

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.city, 'Seattle, Area')
        self.assertEqual(record.vehicle_type, VehicleType.BEV)
        self.assertEqual(record.model_year, 2022)
        self.assertEqual(record.electric_range, 250)
        self.assertEqual(record.base_msrp, 40000)
        self.assertEqual(record.legislative_district, 43)
        self.assertEqual(record.electric_utility, 'City Light')

    def test_invalid_rows_and_blank_lines_are_excluded(self):
        lines = [
            HEADER,
            "V1,King,Seattle,WA,98101,2020,NISSAN,LEAF,Battery Electric Vehicle (BEV),x,150,0,43,PSE",
            "V2,King,Seattle,WA,98101,0,NISSAN,LEAF,Battery Electric Vehicle (BEV),x,150,0,43,PSE",
            "",
            "V3,King,Seattle,WA,98101,2021,,LEAF,Battery Electric Vehicle (BEV),x,150,0,43,PSE",
            "   ",
            "V4,King,Bellevue,WA,98004,2019,KIA,NIRO,Plug-in Hybrid Electric Vehicle (PHEV),x,26,0,41,PSE",
            "V5,King,Bellevue,WA,98004,abc,KIA,NIRO,Plug-in Hybrid Electric Vehicle (PHEV),x,26,0,41,PSE",
        ]
        parser = VehicleCSVParser()

        records = parser.parse("\n".join(lines))

        # 8 lines - header - 3 invalid - 2 blank
        self.assertEqual([r.vin for r in records], ['V1', 'V4'])
        stats = parser.get_statistics()
        self.assertEqual(stats['records_dropped'], 3)
        self.assertEqual(stats['blank_lines'], 2)
        self.assertEqual(stats['drop_reasons'], {'invalid_model_year': 2, 'missing_make': 1})

    def test_empty_and_header_only_input(self):
        self.assertEqual(parse_csv_data(""), [])
        self.assertEqual(parse_csv_data(None), [])
        self.assertEqual(parse_csv_data(HEADER), [])
        self.assertEqual(parse_csv_data(HEADER + "\n"), [])

    def test_header_is_not_validated(self):
        text = "whatever,header\nV1,King,Seattle,WA,98101,2020,TESLA,MODEL Y,Battery Electric Vehicle (BEV)"
        records = parse_csv_data(text)
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].make, 'TESLA')

    def test_missing_trailing_columns_default(self):
        text = HEADER + "\nV1,King,Seattle,WA,98101,2020,TESLA"

        record = parse_csv_data(text)[0]

        self.assertEqual(record.model, '')
        self.assertEqual(record.vehicle_type, VehicleType.PHEV)
        self.assertEqual(record.electric_range, 0)
        self.assertEqual(record.base_msrp, 0)
        self.assertEqual(record.electric_utility, '')

    def test_non_numeric_values_coerce_to_zero(self):
        text = HEADER + "\nV1,King,Seattle,WA,98101,2020,TESLA,MODEL S,Battery Electric Vehicle (BEV),x,n/a,$70000,,PSE"

        record = parse_csv_data(text)[0]

        self.assertEqual(record.electric_range, 0)
        self.assertEqual(record.base_msrp, 0)
        self.assertEqual(record.legislative_district, 0)

    def test_windows_line_endings(self):
        text = HEADER + "\r\nV1,King,Seattle,WA,98101,2020,TESLA,MODEL Y,Battery Electric Vehicle (BEV),x,0,0,43,PSE\r\n"

        records = parse_csv_data(text)

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].electric_utility, 'PSE')

    def test_loosely_quoted_fields_keep_columns_aligned(self):
        text = "\n".join([
            HEADER,
            ('V1,King, "Seattle, Area",WA,98101,2022,Tesla,Model "3, Long",'
             'Battery Electric Vehicle (BEV),x,250,0,43,City Light'),
        ])

        records = parse_csv_data(text)

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual((record.city, record.state, record.model_year, record.make),
                         ('Seattle, Area', 'WA', 2022, 'Tesla'))
        self.assertEqual(record.model, 'Model 3, Long')
        self.assertEqual(record.electric_range, 250)

    def test_records_keep_input_order(self):
        rows = [f"V{i},King,Seattle,WA,98101,{2015 + i},MAKE{i},M,Battery Electric Vehicle (BEV)" for i in range(5)]
        records = parse_csv_data("\n".join([HEADER] + rows))
        self.assertEqual([r.vin for r in records], ['V0', 'V1', 'V2', 'V3', 'V4'])


class TestCSVReader(unittest.TestCase):
    """Test reading raw text from disk."""

    def test_read_text(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False, encoding='utf-8') as f:
            f.write(HEADER + "\n" + QUOTED_ROW + "\n")
            temp_file_path = f.name

        try:
            reader = CSVReader(temp_file_path)
            text = reader.read_text()

            self.assertTrue(text.startswith("VIN (1-10)"))
            self.assertGreater(reader.size_bytes, 0)
            self.assertEqual(len(parse_csv_data(text)), 1)
        finally:
            os.unlink(temp_file_path)

    def test_csv_reader_file_not_found(self):
        reader = CSVReader("non_existent_file.csv")

        with self.assertRaises(FileNotFoundError):
            reader.read_text()

    def test_csv_reader_empty_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
            temp_file_path = f.name

        try:
            text = CSVReader(temp_file_path).read_text()
            self.assertEqual(text, "")
            self.assertEqual(parse_csv_data(text), [])
        finally:
            os.unlink(temp_file_path)


if __name__ == '__main__':
    unittest.main()
