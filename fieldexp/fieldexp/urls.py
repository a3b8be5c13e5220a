"""
URL configuration for the fieldexp project.

  path('', include('core.urls')),        # about page
  path('', include('accounts.urls')),    # login / logout / sign-up / admin login
  path('', include('placements.urls')),  # registration flow + admin dashboard
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('core.urls')),
    path('', include('accounts.urls')),
    path('', include('placements.urls')),
]

handler404 = 'core.views.handler404'
handler500 = 'core.views.handler500'
