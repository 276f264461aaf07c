"""Tests for utils validators module."""

from pathlib import Path
import sys
from unittest.mock import patch, MagicMock

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.utils.validators import EXTERNAL_TOOLS, validate_installation


def which_all(name):
    return f"/usr/bin/{name}"


class TestValidateInstallation:
    """Test cases for validate_installation function."""

    @patch("importlib.import_module")
    def test_modules_only(self, mock_import):
        mock_import.return_value = MagicMock()

        issues = validate_installation(check_tools=False)
        assert issues == []

        actual_calls = [call[0][0] for call in mock_import.call_args_list]
        for module in ["pandas", "numpy", "Bio", "pysam", "yaml", "click", "packaging"]:
            assert module in actual_calls
        # biopython is imported as 'Bio'
        assert "biopython" not in actual_calls

    @patch("importlib.import_module")
    def test_missing_module_reports_distribution_name(self, mock_import):
        def import_side_effect(module_name):
            if module_name in ("yaml", "numpy"):
                raise ImportError(f"No module named '{module_name}'")
            return MagicMock()

        mock_import.side_effect = import_side_effect

        issues = validate_installation(check_tools=False)
        assert sorted(issues) == ["Missing Python module: numpy", "Missing Python module: pyyaml"]

    @patch("mapcov.utils.validators.shutil.which", side_effect=which_all)
    def test_all_tools_found(self, _which):
        assert validate_installation() == []

    @patch("mapcov.utils.validators.shutil.which")
    def test_missing_tools(self, mock_which):
        mock_which.side_effect = lambda name: None if name in ("bedtools", "picard") else which_all(name)
        issues = validate_installation()
        assert "External tool not found: bedtools" in issues
        assert "External tool not found: picard (Picard)" in issues
        assert len(issues) == 2

    @patch("mapcov.utils.validators.shutil.which", side_effect=which_all)
    def test_picard_jar_is_checked(self, _which, tmp_path):
        jar = tmp_path / "picard.jar"
        issues = validate_installation(picard_command=["java", "-jar", str(jar)])
        assert issues == [f"Picard jar not found: {jar}"]

        jar.write_text("")
        assert validate_installation(picard_command=f"java -jar {jar}") == []

    @patch("mapcov.utils.validators.shutil.which", side_effect=which_all)
    def test_empty_picard_command(self, _which):
        assert validate_installation(picard_command=[]) == ["Picard command is empty"]

    def test_tool_list(self):
        assert set(EXTERNAL_TOOLS) == {"bowtie2", "bowtie2-build", "samtools", "bedtools"}
