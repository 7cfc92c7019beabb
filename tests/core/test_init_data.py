# tests/core/test_init_data.py
"""
Тесты разбора initData и data-check-string.
"""

from src.core.auth.init_data import build_data_check_string, parse_init_data


class TestParseInitData:
    """Тесты для parse_init_data."""

    def test_decodes_form_urlencoded(self) -> None:
        """Значения декодируются как application/x-www-form-urlencoded."""
        raw = "user=%7B%22id%22%3A1%7D&query_id=AAA+BBB&auth_date=1700000000"
        fields = parse_init_data(raw)

        assert fields == {
            "user": '{"id":1}',
            "query_id": "AAA BBB",
            "auth_date": "1700000000",
        }

    def test_repeated_key_last_wins(self) -> None:
        """Повторяющийся ключ перезаписывается последним значением."""
        assert parse_init_data("a=1&a=2&b=3") == {"a": "2", "b": "3"}

    def test_keeps_blank_values(self) -> None:
        """Пустые значения сохраняются."""
        assert parse_init_data("start_param=&auth_date=1") == {"start_param": "", "auth_date": "1"}

    def test_empty_input(self) -> None:
        """Пустая строка и None дают пустой словарь."""
        assert parse_init_data("") == {}
        assert parse_init_data(None) == {}  # type: ignore[arg-type]


class TestBuildDataCheckString:
    """Тесты для build_data_check_string."""

    def test_sorted_newline_joined_without_hash(self) -> None:
        """Ключи сортируются, hash исключается, разделитель: перевод строки."""
        fields = {"user": "{}", "hash": "abc", "auth_date": "1", "query_id": "Q"}

        assert build_data_check_string(fields) == "auth_date=1\nquery_id=Q\nuser={}"

    def test_excludes_signature_when_requested(self) -> None:
        """Для Ed25519 исключаются и hash, и signature."""
        fields = {"signature": "sig", "hash": "h", "auth_date": "1"}

        assert build_data_check_string(fields, exclude=("hash", "signature")) == "auth_date=1"

    def test_signature_included_by_default(self) -> None:
        """Для HMAC поле signature участвует в подписи."""
        fields = {"signature": "sig", "hash": "h", "auth_date": "1"}

        assert build_data_check_string(fields) == "auth_date=1\nsignature=sig"

    def test_ordinal_ordering(self) -> None:
        """Сортировка побайтовая: заглавные буквы раньше строчных."""
        fields = {"b": "2", "B": "1", "a": "0", "_x": "3"}

        assert build_data_check_string(fields) == "B=1\n_x=3\na=0\nb=2"

    def test_insertion_order_independent(self) -> None:
        """Порядок вставки ключей не влияет на результат."""
        first = {"user": "u", "auth_date": "1", "chat_type": "private"}
        second = {"chat_type": "private", "auth_date": "1", "user": "u"}

        assert build_data_check_string(first) == build_data_check_string(second)
