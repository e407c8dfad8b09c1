# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Keep the phpbuild debug log of every test inside a temp dir."""

import pytest


@pytest.fixture(autouse=True)
def _isolated_state_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("PHPBUILD_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("PHPBUILD_CONFIG_FILE", raising=False)
    monkeypatch.delenv("PHPBUILD_DRY_RUN", raising=False)
