from userbook.main import run

run()
