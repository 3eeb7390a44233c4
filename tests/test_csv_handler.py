from src.utils.csv_handler import CSVHandler, CSVRecord


def test_missing_file_has_no_records(tmp_path):
    handler = CSVHandler(tmp_path / 'written.csv')
    assert handler.read_records() == []
    assert handler.processed_uids() == set()


def test_write_and_read_records(tmp_path):
    path = tmp_path / 'logs' / 'written.csv'
    handler = CSVHandler(path)

    handler.write_record(CSVRecord('04a1b2c4d5e6f7', 'https://dnd.qrand.me/r/04A1B2C4D5E6F7'))
    handler.write_record(CSVRecord('04FFFFFFFFFFFF', '', 'failed', 'Tag is locked'))

    lines = path.read_text().splitlines()
    assert lines[0] == 'uid,url,status,message'
    assert len(lines) == 3

    records = handler.read_records()
    assert records[1]['message'] == 'Tag is locked'
    assert handler.processed_uids() == {'04A1B2C4D5E6F7'}
