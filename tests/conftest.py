import os
import tempfile

# voido.util.dirs は import 時に home を決めるので、どの voido module よりも先に設定する
os.environ.setdefault("VD_HOME_DIR", tempfile.mkdtemp(prefix="voido-test-home-"))
