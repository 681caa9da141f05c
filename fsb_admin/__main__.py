from fsb_admin.main import serve

serve()
