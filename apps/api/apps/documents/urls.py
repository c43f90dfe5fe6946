from django.urls import path

from .views import FileDownloadView, FileUploadView

urlpatterns = [
    path('files/', FileUploadView.as_view(), name='file-upload'),
    path('files/<uuid:pk>/', FileDownloadView.as_view(), name='file-download'),
]
