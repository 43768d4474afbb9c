# Reportes dashboard package
# Modules:
#   config.py   : settings, routes and logging setup
#   db.py       : Supabase / PostgreSQL connection helpers
#   session.py  : Session value, observable session store, route guard
#   auth.py     : Identity-provider wrapper, login, gate and logout
#   reports.py  : Report records and the report fetcher
#   render.py   : Report list rendering (error / empty / cards)
