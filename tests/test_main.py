"""Tests for configuration parsing and process bootstrap."""

import pytest

import config
from config import ServerConfig, build_arg_parser, config_from_args, load_config
from errors import ConfigurationError
from main import bootstrap, main
from query_builder import MAX_LIMIT


class TestLoadConfig:
    """Tests for command-line parsing."""

    def test_defaults(self):
        cfg = load_config(["--table", "products"])
        assert cfg.table == "products"
        assert cfg.db_path == config.DEFAULT_DB_PATH
        assert cfg.port == config.DEFAULT_PORT
        assert cfg.exclude == ()
        assert cfg.sort is None
        assert cfg.order == "asc"
        assert cfg.limit == 0
        assert cfg.route == "/products"

    def test_short_flags(self):
        cfg = load_config(["-t", "clients", "-d", "x.db", "-p", "9000", "-e", "id, secret",
                           "-s", "name", "-o", "DESC", "-l", "20"])
        assert cfg == ServerConfig(
            table="clients", db_path="x.db", port=9000, exclude=("id", "secret"),
            sort="name", order="desc", limit=20,
        )

    def test_long_flags(self):
        cfg = load_config(["--table", "products", "--exclude", "id,stock", "--sort", "price",
                           "--limit", "50", "--host", "127.0.0.1", "--log-level", "debug",
                           "--schema-ttl", "30"])
        assert cfg.exclude == ("id", "stock")
        assert cfg.sort == "price"
        assert cfg.limit == 50
        assert cfg.host == "127.0.0.1"
        assert cfg.log_level == "DEBUG"
        assert cfg.schema_cache_ttl == 30.0

    def test_missing_table(self):
        with pytest.raises(ConfigurationError):
            config_from_args(build_arg_parser().parse_args([]))

    @pytest.mark.parametrize("argv", [
        ["-t", "p", "--order", "sideways"],
        ["-t", "p", "--limit", "-3"],
        ["-t", "p", "--limit", "ten"],
        ["-t", "p", "--port", "http"],
        ["-t", "p", "--port", "70000"],
        ["-t", "p", "--limit", str(MAX_LIMIT + 1)],
        ["-t", "p", "--limit", "100000000000000000000"],
    ])
    def test_invalid_values_are_usage_errors(self, argv):
        with pytest.raises(SystemExit) as exc:
            load_config(argv)
        assert exc.value.code == 2

    def test_config_is_immutable(self):
        cfg = load_config(["-t", "products"])
        with pytest.raises(AttributeError):
            cfg.table = "other"

    def test_max_values_are_accepted(self):
        cfg = load_config(["-t", "p", "--port", "65535", "--limit", str(MAX_LIMIT)])
        assert cfg.port == 65535
        assert cfg.limit == MAX_LIMIT

    @pytest.mark.parametrize("overrides", [
        {"limit": 10**20},
        {"limit": -1},
        {"port": 70000},
        {"order": "sideways"},
    ])
    def test_config_rejects_out_of_range_values(self, overrides):
        with pytest.raises(ConfigurationError):
            ServerConfig(table="products", **overrides)


class TestMain:
    """Tests for main() exit codes and bootstrap."""

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--help"])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert "--table" in out
        assert "Examples:" in out

    def test_missing_table_exits_one(self, capsys):
        assert main([]) == 1
        err = capsys.readouterr().err
        assert "table name must be specified" in err
        assert "usage:" in err

    def test_unknown_table_exits_one(self, db_path):
        assert main(["--db", str(db_path), "--table", "clients"]) == 1

    def test_missing_database_exits_one(self, tmp_path):
        assert main(["--db", str(tmp_path / "nope.db"), "--table", "products"]) == 1

    def test_bootstrap_registers_table_route(self, db_path):
        app, client = bootstrap(ServerConfig(table="products", db_path=str(db_path)))
        assert client.db_path == str(db_path.resolve())
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert "/products" in rules
        assert app.test_client().get("/products?limit=1").status_code == 200

    def test_bootstrap_unknown_table(self, db_path):
        with pytest.raises(ConfigurationError, match="not found"):
            bootstrap(ServerConfig(table="clients", db_path=str(db_path)))
