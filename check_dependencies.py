# check_dependencies.py
"""
Quick script to verify all required dependencies are installed
Run this before executing speechkit/examples.py
"""

import importlib
import shutil
import sys
from typing import List, Tuple

# distribution name -> (import name, display name)
REQUIRED_PACKAGES = {
    'httpx': ('httpx', 'HTTPX'),
    'pydantic': ('pydantic', 'Pydantic'),
    'python-dotenv': ('dotenv', 'Python-dotenv'),
    'loguru': ('loguru', 'Loguru'),
}

REQUIRED_ENV = {
    'ELEVENLABS_API_KEY': 'ElevenLabs API Key',
}

OPTIONAL_ENV = {
    'ELEVENLABS_BASE_URL': 'ElevenLabs Base URL',
    'ELEVENLABS_TIMEOUT': 'ElevenLabs Timeout',
    'ELEVENLABS_VOICE_ID': 'ElevenLabs Voice ID',
    'ELEVENLABS_MODEL_ID': 'ElevenLabs Model ID',
    'AUDIO_PLAYER': 'Audio Player',
}


def check_imports() -> Tuple[List[str], List[str]]:
    """Check which packages are installed"""
    installed = []
    missing = []

    for package, (module, display_name) in REQUIRED_PACKAGES.items():
        try:
            importlib.import_module(module)
            installed.append(display_name)
        except ImportError:
            missing.append(f"{display_name} ({package})")

    return installed, missing


def mask(env_var: str, value: str) -> str:
    if 'KEY' in env_var or 'TOKEN' in env_var:
        return value[:8] + '...' + value[-4:] if len(value) > 12 else '***'
    return value[:30]


def check_env_vars() -> Tuple[List[str], List[str]]:
    """Check which environment variables are set"""
    from dotenv import load_dotenv
    import os

    load_dotenv()

    found = []
    missing = []

    for env_var, display_name in {**REQUIRED_ENV, **OPTIONAL_ENV}.items():
        value = os.getenv(env_var)
        if value and value.strip():
            found.append(f"{display_name}: {mask(env_var, value)}")
        elif env_var in REQUIRED_ENV:
            missing.append(display_name)

    return found, missing


def check_player() -> bool:
    """The streaming example pipes audio into an external player"""
    import os
    player = os.getenv('AUDIO_PLAYER', 'mpv')
    return shutil.which(player) is not None


def main():
    print("=" * 70)
    print("🔍 SPEECHKIT - DEPENDENCY CHECKER")
    print("=" * 70)

    # Check Python version
    print("\n🐍 Python Version:")
    print(f"   {sys.version}")
    if sys.version_info < (3, 9):
        print("   ⚠️  WARNING: Python 3.9+ is required")
    else:
        print("   ✅ Version OK")

    # Check packages
    print("\n📦 Checking Python Packages...")
    print("-" * 70)
    installed, missing = check_imports()

    if installed:
        print("\n✅ Installed packages:")
        for pkg in installed:
            print(f"   ✓ {pkg}")

    if missing:
        print("\n❌ Missing packages:")
        for pkg in missing:
            print(f"   ✗ {pkg}")
        print("\n💡 Install missing packages with:")
        print("   pip install " + " ".join([p.split('(')[1].rstrip(')') for p in missing]))
    else:
        print("\n✅ All required packages are installed!")

    # Environment variables need python-dotenv
    missing_env = []
    if 'Python-dotenv (python-dotenv)' not in missing:
        print("\n🔐 Checking Environment Variables...")
        print("-" * 70)
        found, missing_env = check_env_vars()

        if found:
            print("\n✅ Found environment variables:")
            for var in found:
                print(f"   ✓ {var}")

        if missing_env:
            print("\n❌ Missing environment variables:")
            for var in missing_env:
                print(f"   ✗ {var}")
            print("\n💡 Add these to your .env file")
        else:
            print("\n✅ All required environment variables are set!")

    print("\n🎧 Checking audio player...")
    if check_player():
        print("   ✅ Player found")
    else:
        print("   ⚠️  Player not found - the streaming example will fail")

    # Final summary
    print("\n" + "=" * 70)
    if not missing and not missing_env:
        print("✅ ALL CHECKS PASSED - Ready to run the examples!")
        print("=" * 70)
        print("\n🚀 Next steps:")
        print("   python -m speechkit.examples all")
        return 0
    else:
        print("⚠️  SOME CHECKS FAILED - Please fix the issues above")
        print("=" * 70)
        return 1

if __name__ == "__main__":
    sys.exit(main())
