"""Unit tests for the build CLI exit codes and argument handling."""

import pytest

from listing_hub.cli.build import build_parser, main


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # setenv first so that values loaded by --env-file are removed on teardown
    for var in ("LH_ARCHIVE_PATH", "LH_OUTPUT_DIR", "LH_SITE_CONFIG"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.mark.unit
class TestBuildCli:
    def test_parser_options(self):
        args = build_parser().parse_args(
            ["--archive", "a.zip", "--output", "out", "--site-config", "s.yml", "-q"]
        )
        assert args.archive == "a.zip"
        assert args.output == "out"
        assert args.site_config == "s.yml"
        assert args.quiet is True

    def test_success_returns_zero(self, make_archive, springfield_tables, tmp_path, capsys):
        archive = make_archive(**springfield_tables)

        code = main(["--archive", str(archive), "--output", str(tmp_path / "public")])

        assert code == 0
        assert (tmp_path / "public" / "sitemap.xml").is_file()
        assert "salons=2" in capsys.readouterr().out

    def test_missing_archive_returns_one(self, tmp_path, capsys):
        code = main(["--archive", str(tmp_path / "missing.zip"), "--output", str(tmp_path / "out")])

        assert code == 1
        assert "Archive not found" in capsys.readouterr().err

    def test_missing_member_returns_one(self, make_archive, tmp_path):
        archive = make_archive(omit=["state.csv"])

        assert main(["--archive", str(archive), "--output", str(tmp_path / "out")]) == 1

    def test_raise_on_error(self, tmp_path):
        from listing_hub.io.readers import ArchiveReadError

        with pytest.raises(ArchiveReadError):
            main(
                [
                    "--archive",
                    str(tmp_path / "missing.zip"),
                    "--output",
                    str(tmp_path / "out"),
                    "--raise-on-error",
                ]
            )

    def test_invalid_site_config_returns_one(self, make_archive, springfield_tables, tmp_path):
        archive = make_archive(**springfield_tables)
        site_config = tmp_path / "site.yml"
        site_config.write_text("site: [unclosed\n", encoding="utf-8")

        code = main(
            [
                "--archive",
                str(archive),
                "--output",
                str(tmp_path / "out"),
                "--site-config",
                str(site_config),
            ]
        )

        assert code == 1

    def test_env_file_supplies_settings(self, make_archive, springfield_tables, tmp_path, monkeypatch):
        archive = make_archive(**springfield_tables)
        env_file = tmp_path / "build.env"
        env_file.write_text(
            f"LH_ARCHIVE_PATH={archive}\nLH_OUTPUT_DIR={tmp_path / 'from-env'}\n",
            encoding="utf-8",
        )

        assert main(["--env-file", str(env_file)]) == 0
        assert (tmp_path / "from-env" / "data" / "salons.json").is_file()

    def test_missing_env_file_returns_one(self, tmp_path):
        assert main(["--env-file", str(tmp_path / "nope.env")]) == 1
