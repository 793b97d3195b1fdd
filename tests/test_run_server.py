import importlib.util
import unittest
from pathlib import Path
from unittest.mock import patch

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_server.py"


def _load_script():
    module_spec = importlib.util.spec_from_file_location("run_server", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class RunServerTest(unittest.TestCase):
    def test_serves_app_under_uvicorn(self):
        module = _load_script()
        with patch("sys.argv", ["run_server.py", "--port", "9001"]), patch.object(module.uvicorn, "run") as run:
            module.main()

        run.assert_called_once()
        args, kwargs = run.call_args
        self.assertEqual(args, ("stockkeeper.main:app",))
        self.assertEqual(kwargs["host"], "127.0.0.1")
        self.assertEqual(kwargs["port"], 9001)
        self.assertFalse(kwargs["reload"])
        self.assertIsNone(kwargs["log_config"])
        self.assertEqual(kwargs["log_level"], kwargs["log_level"].lower())

    def test_app_target_imports(self):
        from stockkeeper.main import app

        self.assertTrue(any(getattr(route, "path", None) == "/health" for route in app.routes))


if __name__ == "__main__":
    unittest.main()
