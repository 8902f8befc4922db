import unittest
from unittest import mock

from nodegrad.infrastructure import (
    RuntimeConfig,
    get_config,
    load_config,
    reset_config,
)
from nodegrad.infrastructure._config import (
    ENV_BACKEND,
    ENV_SEED,
    ENV_STRICT_GRADIENTS,
)


class TestLoadConfig(unittest.TestCase):
    def test_defaults_from_empty_env(self):
        cfg = load_config({})
        self.assertEqual(cfg, RuntimeConfig())
        self.assertEqual(cfg.backend, "cpu")
        self.assertEqual(cfg.seed, 0)
        self.assertFalse(cfg.strict_gradients)

    def test_reads_all_variables(self):
        cfg = load_config(
            {ENV_BACKEND: "cpu", ENV_SEED: "42", ENV_STRICT_GRADIENTS: "1"}
        )
        self.assertEqual(cfg.seed, 42)
        self.assertTrue(cfg.strict_gradients)

    def test_falsy_flag_values(self):
        for raw in ("0", "", "false", "False", "FALSE"):
            with self.subTest(raw=raw):
                cfg = load_config({ENV_STRICT_GRADIENTS: raw})
                self.assertFalse(cfg.strict_gradients)
        self.assertTrue(load_config({ENV_STRICT_GRADIENTS: "yes"}).strict_gradients)

    def test_blank_backend_falls_back_to_cpu(self):
        self.assertEqual(load_config({ENV_BACKEND: "  "}).backend, "cpu")

    def test_bad_seed_raises(self):
        with self.assertRaises(ValueError):
            load_config({ENV_SEED: "seven"})

    def test_config_is_frozen(self):
        cfg = load_config({})
        with self.assertRaises(Exception):
            cfg.seed = 3


class TestCachedConfig(unittest.TestCase):
    def tearDown(self):
        reset_config()

    def test_get_config_is_cached_until_reset(self):
        reset_config()
        with mock.patch.dict("os.environ", {ENV_SEED: "5"}):
            first = get_config()
            self.assertEqual(first.seed, 5)
        with mock.patch.dict("os.environ", {ENV_SEED: "9"}):
            self.assertIs(get_config(), first)
            reset_config()
            self.assertEqual(get_config().seed, 9)


if __name__ == "__main__":
    unittest.main()
