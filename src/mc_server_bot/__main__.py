from mc_server_bot.main import app

app(prog_name="mc-server-bot")
