from mediavault.main import run

run()
