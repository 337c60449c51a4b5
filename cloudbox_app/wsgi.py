# cloudbox_app/wsgi.py
# -*- coding: utf-8 -*-
from cloudbox_app import create_app

app = create_app()
